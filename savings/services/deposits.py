import logging
from typing import Any

from savings.core.config import settings as app_settings
from savings.domain.enums import TransactionType
from savings.domain.schemas import api as api_schemas
from savings.services.allocation import ZERO, to_amount
from savings.services.ledger import TransactionLedger
from savings.services.registry import GoalRegistry
from savings.services.settings_store import SettingsProvider

logger = logging.getLogger(__name__)

class DepositService:
    """Моделирует поступление дохода с автоматическим отчислением в цели."""

    def __init__(
        self,
        registry: GoalRegistry,
        settings_provider: SettingsProvider,
        ledger: TransactionLedger,
    ):
        self.registry = registry
        self.settings_provider = settings_provider
        self.ledger = ledger

    def simulate_deposit(self, income: Any) -> api_schemas.DepositResult:
        value = to_amount(income) or ZERO
        deducted = self.settings_provider.compute_deduction(value)

        if deducted <= 0:
            logger.info("Income %s received, nothing deducted", value)
            return api_schemas.DepositResult(income=value, deducted=ZERO)

        before = {g.id: g.current_amount for g in self.registry.goals}
        goals = self.registry.distribute(deducted)
        credited = [
            g.name
            for g in goals
            if g.current_amount != before.get(g.id, ZERO)
        ]

        self.ledger.record(
            TransactionType.DEPOSIT,
            deducted,
            f"Auto-deduction of {app_settings.APP.CURRENCY} {deducted:,.2f} "
            f"from income of {value:,.2f}",
        )

        return api_schemas.DepositResult(
            income=value,
            deducted=deducted,
            goals=credited,
        )
