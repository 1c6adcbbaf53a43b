class SavingsServiceError(Exception):
    """Базовый класс для ошибок сервиса накоплений."""
    pass

class GoalNotFoundError(SavingsServiceError):
    """Цель не найдена."""
    pass

class InvalidGoalDataError(SavingsServiceError):
    """Некорректные данные для операции с целью."""
    pass

class InvalidSettingsError(SavingsServiceError):
    """Некорректные настройки автоматических отчислений."""
    pass

class PaymentError(SavingsServiceError):
    """Базовый класс для ошибок оплаты и инвестиций."""
    pass

class SavingPeriodActiveError(PaymentError):
    """Период накопления еще не завершен."""
    pass

class InsufficientSavingsError(PaymentError):
    """Недостаточно накоплений для операции."""
    pass

class InvalidPaymentError(PaymentError):
    """Некорректная сумма или реквизиты платежа."""
    pass

class UnknownBillerError(PaymentError):
    """Получатель платежа не найден в каталоге."""
    pass

class UnknownInvestmentOptionError(PaymentError):
    """Инструмент для инвестиций не найден."""
    pass
