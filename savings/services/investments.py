import logging
from decimal import Decimal
from typing import Any

from savings.core import exceptions, metrics
from savings.core.config import settings as app_settings
from savings.domain.enums import AssetType, TransactionType
from savings.domain.schemas import api as api_schemas
from savings.services.ledger import TransactionLedger
from savings.services.payments import TOTAL_SOURCE, validate_amount, withdraw
from savings.services.registry import GoalRegistry
from savings.services.reset_bus import ResetBus

logger = logging.getLogger(__name__)

DSE_OPTIONS: tuple[api_schemas.InvestmentOption, ...] = (
    api_schemas.InvestmentOption(id="crdb", name="CRDB Bank", type=AssetType.STOCK, description="Banking"),
    api_schemas.InvestmentOption(id="nmb", name="NMB Bank", type=AssetType.STOCK, description="Banking"),
    api_schemas.InvestmentOption(id="tbl", name="Tanzania Breweries", type=AssetType.STOCK, description="Consumer goods"),
    api_schemas.InvestmentOption(id="vodacom-tz", name="Vodacom Tanzania", type=AssetType.STOCK, description="Telecom"),
    api_schemas.InvestmentOption(id="umoja", name="UTT Umoja Fund", type=AssetType.UTT, description="Balanced unit trust"),
    api_schemas.InvestmentOption(id="liquid", name="UTT Liquid Fund", type=AssetType.UTT, description="Money market"),
    api_schemas.InvestmentOption(id="tbond-10", name="Treasury Bond 10Y", type=AssetType.BOND, description="Government bond"),
)

class InvestmentService:
    """Моделирует покупку инструментов DSE за счет накоплений."""

    def __init__(
        self,
        registry: GoalRegistry,
        ledger: TransactionLedger,
        reset_bus: ResetBus | None = None,
    ):
        self.registry = registry
        self.ledger = ledger
        self._options = {o.id: o for o in DSE_OPTIONS}
        self._portfolio: list[api_schemas.Investment] = []
        if reset_bus is not None:
            reset_bus.subscribe(lambda _key: self.clear_portfolio())

    def options(self, asset_type: AssetType | None = None) -> list[api_schemas.InvestmentOption]:
        return [
            o for o in self._options.values()
            if asset_type is None or o.type == asset_type
        ]

    @property
    def portfolio(self) -> list[api_schemas.Investment]:
        return list(self._portfolio)

    def total_invested(self) -> Decimal:
        return sum((i.invested_amount for i in self._portfolio), Decimal("0"))

    def invest(
        self,
        option_id: str,
        amount: Any = None,
        source: str = TOTAL_SOURCE,
    ) -> api_schemas.Investment:
        option = self._options.get(option_id)
        if option is None:
            raise exceptions.UnknownInvestmentOptionError(
                f"Unknown investment option: {option_id}"
            )

        value = validate_amount(
            app_settings.INVEST.DEFAULT_AMOUNT if amount is None else amount
        )
        goal_id = withdraw(self.registry, value, source)

        investment = api_schemas.Investment(
            asset_name=option.name,
            asset_type=option.type,
            invested_amount=value,
        )
        self._portfolio.append(investment)

        self.ledger.record(
            TransactionType.INVESTMENT,
            value,
            f"Invested {app_settings.APP.CURRENCY} {value:,.2f} in {option.name}",
            goal_id=goal_id,
        )
        metrics.INVESTMENTS_TOTAL.labels(asset_type=option.type.value).inc()
        logger.info("Investment %s processed", investment.investment_id)
        return investment

    def clear_portfolio(self) -> None:
        self._portfolio.clear()
