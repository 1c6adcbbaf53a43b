from decimal import Decimal

import pytest

from savings.domain.enums import AllocationType
from savings.services import allocation
from savings.services.allocation import (
    deduct_from_goal,
    deduct_from_total,
    distribute,
    total_balance,
)

EPS = Decimal("1e-9")

def _increase(before, after) -> Decimal:
    return total_balance(after) - total_balance(before)

def test_distribute_empty_set_creates_default_goal():
    goals = distribute([], 10000)
    assert len(goals) == 1, "Должна появиться одна цель по умолчанию"
    assert goals[0].name == "My Savings"
    assert goals[0].id == "default-savings"
    assert goals[0].current_amount == Decimal("10000"), "Вся сумма уходит в цель по умолчанию"
    assert goals[0].allocation_type == AllocationType.PERCENTAGE
    assert goals[0].allocation_value == Decimal("100")

def test_distribute_equal_split_when_all_allocations_zero(make_goal):
    goals = [make_goal(id="g1"), make_goal(id="g2")]
    result = distribute(goals, 1000)
    assert result[0].current_amount == Decimal("500")
    assert result[1].current_amount == Decimal("500")

def test_distribute_equal_split_adds_to_existing_balance(make_goal):
    goals = [make_goal(id="g1", current=100), make_goal(id="g2", current=0), make_goal(id="g3", current=7)]
    result = distribute(goals, 300)
    assert [g.current_amount for g in result] == [Decimal("200"), Decimal("100"), Decimal("107")]

def test_distribute_scales_oversubscribed_percentages(make_goal):
    goals = [
        make_goal(id="a", allocation_value=70),
        make_goal(id="b", allocation_value=50),
    ]
    result = distribute(goals, 1000)
    assert abs(result[0].current_amount - Decimal("583.3333333333")) < Decimal("1e-6")
    assert abs(result[1].current_amount - Decimal("416.6666666667")) < Decimal("1e-6")
    assert abs(_increase(goals, result) - Decimal("1000")) < EPS, "Сумма долей равна пополнению"

def test_distribute_scales_oversubscribed_fixed(make_goal):
    goals = [
        make_goal(id="a", allocation_type=AllocationType.FIXED, allocation_value=600),
        make_goal(id="b", allocation_type=AllocationType.FIXED, allocation_value=900),
    ]
    result = distribute(goals, 500)
    assert result[0].current_amount == Decimal("200")
    assert result[1].current_amount == Decimal("300")

def test_distribute_mixed_rules_applied_as_requested(make_goal):
    goals = [
        make_goal(id="a", allocation_type=AllocationType.FIXED, allocation_value=100),
        make_goal(id="b", allocation_value=20),
    ]
    result = distribute(goals, 1000)
    assert result[0].current_amount == Decimal("100")
    assert result[1].current_amount == Decimal("200")

def test_distribute_under_allocation_drops_remainder(make_goal):
    goals = [make_goal(id="a", allocation_value=30), make_goal(id="b", allocation_value=0)]
    result = distribute(goals, 1000)
    assert result[0].current_amount == Decimal("300")
    assert result[1] is goals[1], "Цель без доли не изменяется"
    assert _increase(goals, result) == Decimal("300"), "Остаток 700 не зачисляется никуда"

def test_distribute_exact_subscription_conserves_amount(make_goal):
    goals = [
        make_goal(id="a", allocation_value=25),
        make_goal(id="b", allocation_value=75),
        make_goal(id="c", allocation_type=AllocationType.FIXED, allocation_value=0),
    ]
    result = distribute(goals, Decimal("1234.56"))
    assert abs(_increase(goals, result) - Decimal("1234.56")) < EPS

@pytest.mark.parametrize("amount", [0, -5, None, "abc", float("nan"), float("inf")])
def test_distribute_invalid_amount_is_noop(make_goal, amount):
    goals = [make_goal(id="a", current=50, allocation_value=10)]
    assert distribute(goals, amount) == tuple(goals)

def test_distribute_zero_amount_on_empty_set_is_noop():
    assert distribute([], 0) == ()

def test_distribute_does_not_mutate_input(make_goal):
    goals = [make_goal(id="a", allocation_value=50)]
    distribute(goals, 1000)
    assert goals[0].current_amount == Decimal("0"), "Исходный снимок не меняется"

def test_distribute_accepts_float_and_string(make_goal):
    goals = [make_goal(id="a", allocation_value=10)]
    assert distribute(goals, 0.5)[0].current_amount == Decimal("0.05")
    assert distribute(goals, "200")[0].current_amount == Decimal("20")

def test_deduct_from_goal_clamps_at_zero(make_goal):
    goals = [make_goal(id="a", current=300)]
    result = deduct_from_goal(goals, "a", 500)
    assert result[0].current_amount == Decimal("0"), "Баланс не уходит в минус"

def test_deduct_from_goal_touches_only_target(make_goal):
    goals = [make_goal(id="a", current=300), make_goal(id="b", current=300)]
    result = deduct_from_goal(goals, "b", 120)
    assert result[0] is goals[0]
    assert result[1].current_amount == Decimal("180")

@pytest.mark.parametrize("goal_id,amount", [("missing", 10), ("a", 0), ("a", -1), ("a", "x")])
def test_deduct_from_goal_noop_cases(make_goal, goal_id, amount):
    goals = [make_goal(id="a", current=300)]
    assert deduct_from_goal(goals, goal_id, amount) == tuple(goals)

def test_deduct_from_goal_with_empty_balance_is_noop(make_goal):
    goals = [make_goal(id="a", current=0)]
    assert deduct_from_goal(goals, "a", 10) == tuple(goals)

def test_deduct_from_total_drains_in_order(make_goal):
    goals = [make_goal(id="a", current=200), make_goal(id="b", current=300)]
    result = deduct_from_total(goals, 250)
    assert result[0].current_amount == Decimal("0")
    assert result[1].current_amount == Decimal("250")

def test_deduct_from_total_skips_empty_goals(make_goal):
    goals = [make_goal(id="a", current=0), make_goal(id="b", current=100), make_goal(id="c", current=100)]
    result = deduct_from_total(goals, 50)
    assert result[0] is goals[0]
    assert result[1].current_amount == Decimal("50")
    assert result[2] is goals[2], "Следующие цели не трогаются после покрытия суммы"

def test_deduct_from_total_over_withdrawal_drains_everything(make_goal):
    goals = [make_goal(id="a", current=100), make_goal(id="b", current=50)]
    result = deduct_from_total(goals, 1000)
    assert total_balance(result) == Decimal("0"), "Излишек отбрасывается без ошибки"
    assert all(g.current_amount >= 0 for g in result)

@pytest.mark.parametrize("amount", [0, -10, None])
def test_deduct_from_total_invalid_amount_is_noop(make_goal, amount):
    goals = [make_goal(id="a", current=100)]
    assert deduct_from_total(goals, amount) == tuple(goals)

def test_requested_share_rules(make_goal):
    amount = Decimal("2000")
    assert allocation.requested_share(make_goal(allocation_value=0), amount) == 0
    assert allocation.requested_share(
        make_goal(allocation_type=AllocationType.FIXED, allocation_value=150), amount
    ) == Decimal("150")
    assert allocation.requested_share(make_goal(allocation_value=15), amount) == Decimal("300")

def test_to_amount_rejects_non_numbers():
    assert allocation.to_amount(True) is None
    assert allocation.to_amount("1e3") == Decimal("1000")
    assert allocation.to_amount([1]) is None
