import logging
from decimal import Decimal
from typing import Any, Mapping

from savings.core import exceptions
from savings.core.config import settings as app_settings
from savings.domain.enums import DeductionType
from savings.domain.schemas import api as api_schemas
from savings.services.allocation import HUNDRED, ZERO, to_amount

logger = logging.getLogger(__name__)

def _demo_settings() -> api_schemas.DeductionSettings:
    defaults = app_settings.DEDUCTION
    return api_schemas.DeductionSettings(
        deduction_type=DeductionType(defaults.DEFAULT_TYPE),
        amount=defaults.DEFAULT_AMOUNT,
        is_enabled=defaults.DEFAULT_ENABLED,
        duration_months=max(
            defaults.DEFAULT_DURATION_MONTHS,
            defaults.MIN_DURATION_MONTHS,
        ),
    )

def _clamp_duration(value: Any) -> int:
    min_months = app_settings.DEDUCTION.MIN_DURATION_MONTHS
    try:
        months = int(value)
    except (TypeError, ValueError):
        return min_months
    return max(min_months, months)

class SettingsProvider:
    """Настройки автоматического отчисления с каждого дохода."""

    def __init__(self, initial: api_schemas.DeductionSettings | None = None):
        self._settings = initial or _demo_settings()

    @property
    def current(self) -> api_schemas.DeductionSettings:
        return self._settings

    def _update(self, **changes) -> api_schemas.DeductionSettings:
        self._settings = self._settings.model_copy(update=changes)
        logger.debug("Deduction settings changed: %s", changes)
        return self._settings

    def set_deduction_type(self, deduction_type: DeductionType | str) -> api_schemas.DeductionSettings:
        try:
            deduction_type = DeductionType(deduction_type)
        except ValueError:
            raise exceptions.InvalidSettingsError(
                f"Unknown deduction type: {deduction_type}"
            )
        return self._update(deduction_type=deduction_type)

    def set_amount(self, amount: Any) -> api_schemas.DeductionSettings:
        value = to_amount(amount)
        if value is None or value < 0:
            raise exceptions.InvalidSettingsError("Amount must be a non-negative number")
        return self._update(amount=value)

    def set_duration_months(self, months: Any) -> api_schemas.DeductionSettings:
        return self._update(duration_months=_clamp_duration(months))

    def toggle_enabled(self) -> api_schemas.DeductionSettings:
        return self._update(is_enabled=not self._settings.is_enabled)

    def set_all(self, data: Mapping[str, Any] | None) -> api_schemas.DeductionSettings:
        """Заменяет все настройки, недостающие поля берутся из демо-значений."""
        data = data or {}
        demo = _demo_settings()

        raw_type = data.get("deduction_type") or data.get("deductionType")
        try:
            deduction_type = DeductionType(raw_type) if raw_type else demo.deduction_type
        except ValueError:
            raise exceptions.InvalidSettingsError(f"Unknown deduction type: {raw_type}")

        amount = to_amount(data.get("amount"))
        if amount is None or amount < 0:
            amount = demo.amount

        is_enabled = data.get("is_enabled", data.get("isEnabled"))
        if not isinstance(is_enabled, bool):
            is_enabled = demo.is_enabled

        months = data.get("duration_months", data.get("durationMonths"))
        duration = _clamp_duration(months) if months else demo.duration_months

        self._settings = api_schemas.DeductionSettings(
            deduction_type=deduction_type,
            amount=amount,
            is_enabled=is_enabled,
            duration_months=duration,
        )
        return self._settings

    def reset_to_demo(self) -> api_schemas.DeductionSettings:
        self._settings = _demo_settings()
        logger.info("Deduction settings reset to demo defaults")
        return self._settings

    @staticmethod
    def validate_onboarding(deduction_type: Any, amount: Any) -> api_schemas.DeductionSettings:
        """Проверяет выбор пользователя на шаге онбординга."""
        if not deduction_type or amount in (None, ""):
            raise exceptions.InvalidSettingsError(
                "Deduction type and amount are required"
            )
        try:
            deduction_type = DeductionType(deduction_type)
        except ValueError:
            raise exceptions.InvalidSettingsError(
                f"Unknown deduction type: {deduction_type}"
            )

        value = to_amount(amount)
        if value is None or value <= 0:
            raise exceptions.InvalidSettingsError("Amount must be positive")
        if deduction_type == DeductionType.PERCENTAGE and value > HUNDRED:
            raise exceptions.InvalidSettingsError("Percentage cannot exceed 100%")

        return api_schemas.DeductionSettings(deduction_type=deduction_type, amount=value)

    def compute_deduction(self, income: Any) -> Decimal:
        """Сумма, которую нужно отложить с одного поступления дохода."""
        value = to_amount(income)
        current = self._settings
        if value is None or value <= 0 or not current.is_enabled:
            return ZERO
        if current.amount <= 0:
            return ZERO

        if current.deduction_type == DeductionType.PERCENTAGE:
            return value * current.amount / HUNDRED
        return min(current.amount, value)

    def can_pay_bills(self) -> bool:
        return (
            not self._settings.is_enabled
            and self._settings.duration_months >= app_settings.DEDUCTION.MIN_DURATION_MONTHS
        )
