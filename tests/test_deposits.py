from datetime import datetime, timezone
from decimal import Decimal

from savings.dependencies import SavingsApp
from savings.domain.enums import AllocationType, TransactionType
from savings.domain.schemas.api import CreateGoalRequest

def test_first_deposit_creates_default_goal(savings_app: SavingsApp):
    result = savings_app.deposits.simulate_deposit(1200000)
    assert result.deducted == Decimal("120000"), "10% от дохода по умолчанию"
    assert result.goals == ["My Savings"]
    assert savings_app.registry.total_balance() == Decimal("120000")

def test_deposit_follows_goal_rules(savings_app: SavingsApp):
    registry = savings_app.registry
    registry.add_goal(CreateGoalRequest(id="school", name="School fees", allocation_value=60))
    registry.add_goal(
        CreateGoalRequest(
            id="rent",
            name="Rent",
            allocation_type=AllocationType.FIXED,
            allocation_value=20000,
        )
    )
    registry.add_goal(CreateGoalRequest(id="idle", name="Idle"))

    result = savings_app.deposits.simulate_deposit(500000)

    assert result.deducted == Decimal("50000")
    assert registry.get("school").current_amount == Decimal("30000")
    assert registry.get("rent").current_amount == Decimal("20000")
    assert registry.get("idle").current_amount == Decimal("0")
    assert sorted(result.goals) == ["Rent", "School fees"]

def test_deposit_disabled_records_nothing(savings_app: SavingsApp):
    savings_app.settings_provider.toggle_enabled()
    result = savings_app.deposits.simulate_deposit(100000)
    assert result.deducted == Decimal("0")
    assert savings_app.registry.goals == ()
    assert savings_app.ledger.transactions == []

def test_deposit_recorded_in_ledger(savings_app: SavingsApp, freeze_utc_now):
    savings_app.deposits.simulate_deposit(100000)
    transaction = savings_app.ledger.transactions[0]
    assert transaction.type == TransactionType.DEPOSIT
    assert transaction.amount == Decimal("10000")
    assert transaction.created_at == datetime(2025, 10, 29, tzinfo=timezone.utc)
    assert "TZS" in transaction.description
    assert savings_app.ledger.total_by_type(TransactionType.DEPOSIT) == Decimal("10000")

def test_start_fresh_clears_everything(savings_app: SavingsApp):
    savings_app.deposits.simulate_deposit(1000000)
    savings_app.investments.invest("nmb", amount=5000)
    savings_app.settings_provider.set_duration_months(12)

    key = savings_app.start_fresh()

    assert key == 1
    assert savings_app.registry.goals == ()
    assert savings_app.ledger.transactions == [], "История очищена по сигналу сброса"
    assert savings_app.investments.portfolio == [], "Портфель очищен по сигналу сброса"
    assert savings_app.settings_provider.current.duration_months == 6
