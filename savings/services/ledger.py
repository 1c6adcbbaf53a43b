import logging
from decimal import Decimal

from savings.domain.enums import TransactionType
from savings.domain.schemas import api as api_schemas
from savings.services.reset_bus import ResetBus

logger = logging.getLogger(__name__)

class TransactionLedger:
    """Локальная история смоделированных операций, новые записи первыми."""

    def __init__(self, reset_bus: ResetBus | None = None):
        self._transactions: list[api_schemas.Transaction] = []
        if reset_bus is not None:
            reset_bus.subscribe(lambda _key: self.clear())

    @property
    def transactions(self) -> list[api_schemas.Transaction]:
        return list(self._transactions)

    def record(
        self,
        type: TransactionType,
        amount: Decimal,
        description: str,
        goal_id: str | None = None,
    ) -> api_schemas.Transaction:
        transaction = api_schemas.Transaction(
            type=type,
            amount=amount,
            description=description,
            goal_id=goal_id,
        )
        self._transactions.insert(0, transaction)
        logger.info(
            "Recorded %s transaction %s",
            type.value,
            transaction.transaction_id,
        )
        return transaction

    def total_by_type(self, type: TransactionType) -> Decimal:
        return sum(
            (t.amount for t in self._transactions if t.type == type),
            Decimal("0"),
        )

    def clear(self) -> None:
        self._transactions.clear()
