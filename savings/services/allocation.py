"""
Распределение пополнений по целям и списание с целей.

Все функции чистые: принимают снимок целей и возвращают новый кортеж.
Исключения не выбрасываются, вырожденные входные данные дают no-op
или срабатывание одной из резервных политик.
"""
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Sequence

from savings.core.config import settings
from savings.domain.enums import AllocationType
from savings.domain.schemas.api import Goal

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")

def to_amount(value: Any) -> Decimal | None:
    """Приводит сумму к Decimal. None для нечисловых и бесконечных значений."""
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return None
    if not amount.is_finite():
        return None
    return amount

def requested_share(goal: Goal, amount: Decimal) -> Decimal:
    value = to_amount(goal.allocation_value) or ZERO
    if value <= 0:
        return ZERO
    if goal.allocation_type == AllocationType.FIXED:
        return value
    return amount * value / HUNDRED

def total_balance(goals: Sequence[Goal]) -> Decimal:
    return sum((g.current_amount for g in goals), ZERO)

def _default_goal(amount: Decimal) -> Goal:
    return Goal(
        id=settings.GOALS.DEFAULT_GOAL_ID,
        name=settings.GOALS.DEFAULT_GOAL_NAME,
        target_amount=ZERO,
        current_amount=amount,
        allocation_type=AllocationType.PERCENTAGE,
        allocation_value=HUNDRED,
    )

def distribute(goals: Sequence[Goal], amount: Any) -> tuple[Goal, ...]:
    """
    Распределяет пополнение по целям согласно их правилам.

    Запрошенные доли больше суммы пополнения пропорционально уменьшаются.
    Недобор (сумма долей меньше пополнения) никуда не зачисляется.
    """
    value = to_amount(amount)
    if value is None or value <= 0:
        return tuple(goals)

    requests = [requested_share(g, value) for g in goals]
    total_requested = sum(requests, ZERO)

    if total_requested <= 0:
        if not goals:
            logger.info("No goals yet, creating default goal for deposit %s", value)
            return (_default_goal(value),)

        equal_share = value / len(goals)
        logger.info(
            "No positive allocations, splitting %s equally across %s goals",
            value,
            len(goals),
        )
        return tuple(
            g.model_copy(update={"current_amount": g.current_amount + equal_share})
            for g in goals
        )

    oversubscribed = total_requested > value
    updated = []
    for goal, requested in zip(goals, requests):
        share = requested * value / total_requested if oversubscribed else requested
        if share <= 0:
            updated.append(goal)
            continue
        updated.append(
            goal.model_copy(update={"current_amount": goal.current_amount + share})
        )

    if not oversubscribed and total_requested < value:
        logger.debug(
            "Unallocated remainder %s of deposit %s",
            value - total_requested,
            value,
        )

    return tuple(updated)

def deduct_from_goal(goals: Sequence[Goal], goal_id: str, amount: Any) -> tuple[Goal, ...]:
    """Списывает сумму с одной цели, не уходя ниже нуля."""
    value = to_amount(amount)
    if value is None or value <= 0:
        return tuple(goals)

    updated = []
    for goal in goals:
        if goal.id != goal_id or goal.current_amount <= 0:
            updated.append(goal)
            continue
        deducted = min(value, goal.current_amount)
        updated.append(
            goal.model_copy(
                update={"current_amount": max(ZERO, goal.current_amount - deducted)}
            )
        )
    return tuple(updated)

def deduct_from_total(goals: Sequence[Goal], amount: Any) -> tuple[Goal, ...]:
    """
    Списывает сумму с общего баланса, опустошая цели по порядку.

    Остаток сверх доступных средств отбрасывается.
    """
    remaining = to_amount(amount)
    if remaining is None or remaining <= 0:
        return tuple(goals)

    updated = []
    for goal in goals:
        if remaining <= 0 or goal.current_amount <= 0:
            updated.append(goal)
            continue
        deducted = min(goal.current_amount, remaining)
        remaining -= deducted
        updated.append(
            goal.model_copy(update={"current_amount": goal.current_amount - deducted})
        )

    if remaining > 0:
        logger.debug("Deduction exceeded available savings by %s", remaining)

    return tuple(updated)
