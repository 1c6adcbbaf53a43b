from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from savings.domain.enums import (
    AllocationType,
    AssetType,
    BillerCategory,
    DeductionType,
    ReferenceType,
    TransactionType,
)

def to_camel(string: str) -> str:
    parts = string.split("_")
    return parts[0] + "".join(word.capitalize() for word in parts[1:])

def _utc_now() -> datetime:
    return datetime.now(timezone.utc)

class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

class Goal(CamelModel):
    """Цель накопления. Снимок неизменяемый, изменения через model_copy."""

    id: str = Field(default_factory=lambda: str(uuid4()), description="ID цели")
    name: str = Field(..., description="Название цели")
    target_amount: Decimal = Field(Decimal("0"), ge=0, description="Целевая сумма")
    current_amount: Decimal = Field(Decimal("0"), ge=0, description="Текущая накопленная сумма")
    allocation_type: AllocationType = Field(
        AllocationType.PERCENTAGE,
        description="Как трактовать allocation_value",
    )
    allocation_value: Decimal = Field(
        Decimal("0"),
        ge=0,
        description="Процент (0-100) или фиксированная сумма с каждого пополнения",
    )

    model_config = ConfigDict(frozen=True)

    @property
    def remaining_amount(self) -> Decimal:
        if self.current_amount >= self.target_amount:
            return Decimal("0")
        return self.target_amount - self.current_amount

    @property
    def progress(self) -> Decimal:
        """Доля выполнения для отображения, ограничена отрезком [0, 1]."""
        if self.target_amount <= 0:
            return Decimal("0")
        return min(self.current_amount / self.target_amount, Decimal("1"))

    @property
    def is_achieved(self) -> bool:
        return self.target_amount > 0 and self.current_amount >= self.target_amount

class CreateGoalRequest(CamelModel):
    id: Optional[str] = Field(None, description="Явный ID (иначе генерируется)")
    name: str = Field(..., min_length=1, max_length=255, description="Название цели")
    target_amount: Decimal = Field(Decimal("0"), ge=0, description="Целевая сумма")
    allocation_type: AllocationType = Field(AllocationType.PERCENTAGE)
    allocation_value: Decimal = Field(Decimal("0"), ge=0)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v

class GoalPatchRequest(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    target_amount: Optional[Decimal] = Field(None, ge=0)
    current_amount: Optional[Decimal] = Field(None, ge=0)
    allocation_type: Optional[AllocationType] = None
    allocation_value: Optional[Decimal] = Field(None, ge=0)

class DeductionSettings(CamelModel):
    deduction_type: DeductionType = Field(DeductionType.PERCENTAGE, description="Тип отчисления")
    amount: Decimal = Field(Decimal("10"), ge=0, description="Процент или фиксированная сумма")
    is_enabled: bool = Field(True, description="Автоматическое отчисление включено")
    duration_months: int = Field(6, description="Срок накопления в месяцах")

    model_config = ConfigDict(frozen=True)

class Transaction(CamelModel):
    transaction_id: UUID = Field(default_factory=uuid4)
    type: TransactionType
    amount: Decimal = Field(..., gt=0)
    description: str
    goal_id: Optional[str] = Field(None, description="Цель-источник (None для общего баланса)")
    created_at: datetime = Field(default_factory=_utc_now)

    model_config = ConfigDict(frozen=True)

class Biller(CamelModel):
    id: str
    name: str
    category: BillerCategory

    model_config = ConfigDict(frozen=True)

class InvestmentOption(CamelModel):
    id: str
    name: str
    type: AssetType
    description: str = ""

    model_config = ConfigDict(frozen=True)

class Investment(CamelModel):
    investment_id: UUID = Field(default_factory=uuid4)
    asset_name: str
    asset_type: AssetType
    invested_amount: Decimal = Field(..., gt=0)
    created_at: datetime = Field(default_factory=_utc_now)

    model_config = ConfigDict(frozen=True)

class BillPaymentRequest(CamelModel):
    biller_id: str
    reference_type: ReferenceType = ReferenceType.CONTROL
    reference_value: str
    amount: Decimal
    source: str = Field("total", description="'total' или ID цели")

class DepositResult(CamelModel):
    income: Decimal
    deducted: Decimal
    goals: list[str] = Field(default_factory=list, description="Цели, получившие средства")
