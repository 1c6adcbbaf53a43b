from datetime import datetime, timezone
from decimal import Decimal

import pytest
from faker import Faker
from freezegun import freeze_time
from prometheus_client import REGISTRY

from savings.dependencies import SavingsApp
from savings.domain.enums import AllocationType
from savings.domain.schemas.api import Goal
from savings.services.registry import GoalRegistry
from savings.services.settings_store import SettingsProvider

@pytest.fixture(scope="session")
def faker():
    return Faker()

@pytest.fixture
def make_goal(faker):
    """Фабрика целей с разумными значениями по умолчанию."""

    def _make(
        id: str | None = None,
        current: str | int = 0,
        target: str | int = 100000,
        allocation_type: AllocationType = AllocationType.PERCENTAGE,
        allocation_value: str | int = 0,
        name: str | None = None,
    ) -> Goal:
        return Goal(
            id=id or faker.uuid4(),
            name=name or faker.word().capitalize(),
            target_amount=Decimal(str(target)),
            current_amount=Decimal(str(current)),
            allocation_type=allocation_type,
            allocation_value=Decimal(str(allocation_value)),
        )

    return _make

@pytest.fixture
def registry():
    return GoalRegistry()

@pytest.fixture
def settings_provider():
    return SettingsProvider()

@pytest.fixture
def savings_app():
    return SavingsApp()

@pytest.fixture
def payable_app(savings_app: SavingsApp):
    """Приложение, в котором период накопления завершен и счета можно оплачивать."""
    savings_app.settings_provider.toggle_enabled()
    return savings_app

@pytest.fixture
def freeze_utc_now():
    with freeze_time(datetime(2025, 10, 29, tzinfo=timezone.utc)) as frozen:
        yield frozen

@pytest.fixture
def metric_value():
    """Текущее значение метрики Prometheus (0, если семпла еще нет)."""

    def _value(name: str, labels: dict | None = None) -> float:
        return REGISTRY.get_sample_value(name, labels or {}) or 0.0

    return _value
