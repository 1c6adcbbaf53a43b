import logging
from decimal import Decimal
from typing import Any

from savings.core import exceptions, metrics
from savings.core.config import settings as app_settings
from savings.domain.enums import BillerCategory, TransactionType
from savings.domain.schemas import api as api_schemas
from savings.services.allocation import to_amount
from savings.services.ledger import TransactionLedger
from savings.services.registry import GoalRegistry
from savings.services.settings_store import SettingsProvider

logger = logging.getLogger(__name__)

TOTAL_SOURCE = "total"

BILLERS: tuple[api_schemas.Biller, ...] = (
    api_schemas.Biller(id="tanesco", name="TANESCO (Electricity)", category=BillerCategory.UTILITY),
    api_schemas.Biller(id="dawasa", name="DAWASA (Water)", category=BillerCategory.UTILITY),
    api_schemas.Biller(id="duwasa", name="DUWASA (Water)", category=BillerCategory.UTILITY),
    api_schemas.Biller(id="ttcl", name="TTCL", category=BillerCategory.INTERNET),
    api_schemas.Biller(id="vodacom", name="Vodacom", category=BillerCategory.MOBILE),
    api_schemas.Biller(id="airtel", name="Airtel", category=BillerCategory.MOBILE),
    api_schemas.Biller(id="tigo", name="Tigo", category=BillerCategory.MOBILE),
    api_schemas.Biller(id="halotel", name="Halotel", category=BillerCategory.MOBILE),
    api_schemas.Biller(id="zantel", name="Zantel", category=BillerCategory.MOBILE),
    api_schemas.Biller(id="azam", name="Azam TV", category=BillerCategory.ENTERTAINMENT),
    api_schemas.Biller(id="dstv", name="DStv", category=BillerCategory.ENTERTAINMENT),
    api_schemas.Biller(id="startimes", name="StarTimes", category=BillerCategory.ENTERTAINMENT),
    api_schemas.Biller(id="other", name="Other company (not listed)", category=BillerCategory.OTHER),
)

def validate_amount(amount: Any) -> Decimal:
    value = to_amount(amount)
    if value is None or value <= 0:
        raise exceptions.InvalidPaymentError("Please enter a valid amount")
    return value

def withdraw(
    registry: GoalRegistry,
    amount: Decimal,
    source: str = TOTAL_SOURCE,
) -> str | None:
    """
    Проверяет достаточность средств и списывает сумму.

    source == "total" списывает с общего баланса, иначе с указанной цели.
    Возвращает ID цели-источника или None для общего баланса.
    """
    if source == TOTAL_SOURCE:
        if registry.total_balance() < amount:
            raise exceptions.InsufficientSavingsError(
                "Your total savings are not enough to cover this amount"
            )
        registry.deduct_from_total(amount)
        return None

    goal = registry.find(source)
    if goal is None or goal.current_amount <= 0:
        raise exceptions.InsufficientSavingsError(
            "This goal has no savings, choose another goal or total savings"
        )
    if goal.current_amount < amount:
        raise exceptions.InsufficientSavingsError(
            "The selected goal does not have enough savings"
        )
    registry.deduct_from_goal(goal.id, amount)
    return goal.id

class BillPaymentService:
    """Оплата счетов из накоплений после окончания периода накопления."""

    def __init__(
        self,
        registry: GoalRegistry,
        settings_provider: SettingsProvider,
        ledger: TransactionLedger,
    ):
        self.registry = registry
        self.settings_provider = settings_provider
        self.ledger = ledger
        self._billers = {b.id: b for b in BILLERS}

    @property
    def billers(self) -> list[api_schemas.Biller]:
        return list(self._billers.values())

    def search(self, query: str) -> list[api_schemas.Biller]:
        needle = (query or "").strip().lower()
        return [b for b in self._billers.values() if needle in b.name.lower()]

    def get_biller(self, biller_id: str) -> api_schemas.Biller:
        biller = self._billers.get(biller_id)
        if biller is None:
            raise exceptions.UnknownBillerError(f"Unknown biller: {biller_id}")
        return biller

    def ensure_can_pay(self) -> None:
        if not self.settings_provider.can_pay_bills():
            raise exceptions.SavingPeriodActiveError(
                "You can pay bills only after your saving duration is completed"
            )
        if self.registry.total_balance() <= 0:
            raise exceptions.InsufficientSavingsError(
                "You need to have saved some money before paying bills"
            )

    def pay(self, request: api_schemas.BillPaymentRequest) -> api_schemas.Transaction:
        self.ensure_can_pay()
        biller = self.get_biller(request.biller_id)
        amount = validate_amount(request.amount)

        if not request.reference_value.strip():
            raise exceptions.InvalidPaymentError(
                "Please enter the control number, phone number, or Lipa number"
            )

        goal_id = withdraw(self.registry, amount, request.source)

        metrics.BILL_PAYMENTS_TOTAL.labels(category=biller.category.value).inc()
        logger.info(
            "Bill paid",
            extra={
                "extra": {
                    "biller_id": biller.id,
                    "amount": amount,
                    "source": request.source,
                }
            },
        )

        return self.ledger.record(
            TransactionType.BILL_PAYMENT,
            amount,
            f"Paid {app_settings.APP.CURRENCY} {amount:,.2f} to {biller.name} "
            f"({request.reference_type.value}: {request.reference_value.strip()})",
            goal_id=goal_id,
        )
