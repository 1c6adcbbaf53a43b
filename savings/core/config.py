from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict

class AppSettings(BaseSettings):
    LOG_LEVEL: str = "INFO"
    CURRENCY: str = "TZS"

class GoalSettings(BaseSettings):
    DEFAULT_GOAL_ID: str = "default-savings"
    DEFAULT_GOAL_NAME: str = "My Savings"

class DeductionDefaults(BaseSettings):
    DEFAULT_TYPE: str = "percentage"
    DEFAULT_AMOUNT: Decimal = Decimal("10")
    DEFAULT_ENABLED: bool = True
    DEFAULT_DURATION_MONTHS: int = 6
    MIN_DURATION_MONTHS: int = 6

class InvestSettings(BaseSettings):
    DEFAULT_AMOUNT: Decimal = Decimal("50000")

class Settings(BaseSettings):
    APP: AppSettings = AppSettings()
    GOALS: GoalSettings = GoalSettings()
    DEDUCTION: DeductionDefaults = DeductionDefaults()
    INVEST: InvestSettings = InvestSettings()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

settings = Settings()
