import logging

from savings.services.deposits import DepositService
from savings.services.investments import InvestmentService
from savings.services.ledger import TransactionLedger
from savings.services.payments import BillPaymentService
from savings.services.registry import GoalRegistry
from savings.services.reset_bus import ResetBus
from savings.services.settings_store import SettingsProvider

logger = logging.getLogger(__name__)

class SavingsApp:
    """Собирает хранилища и сервисы прототипа в один граф зависимостей."""

    def __init__(
        self,
        registry: GoalRegistry | None = None,
        settings_provider: SettingsProvider | None = None,
    ):
        self.reset_bus = ResetBus()
        self.registry = registry or GoalRegistry()
        self.settings_provider = settings_provider or SettingsProvider()
        self.ledger = TransactionLedger(self.reset_bus)

        self.deposits = DepositService(self.registry, self.settings_provider, self.ledger)
        self.payments = BillPaymentService(self.registry, self.settings_provider, self.ledger)
        self.investments = InvestmentService(self.registry, self.ledger, self.reset_bus)

    def start_fresh(self) -> int:
        """Полный сброс демо: цели, настройки и локальные состояния подписчиков."""
        self.registry.reset()
        self.settings_provider.reset_to_demo()
        key = self.reset_bus.reset()
        logger.info("Demo started fresh (reset key %s)", key)
        return key
