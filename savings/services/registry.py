import logging
from decimal import Decimal
from typing import Any, Callable

from savings.core import exceptions, metrics
from savings.domain.enums import AllocationType, GoalEventType
from savings.domain.schemas import api as api_schemas
from savings.services import allocation
from savings.utils import serialization

logger = logging.getLogger(__name__)

GoalsSnapshot = tuple[api_schemas.Goal, ...]
GoalsListener = Callable[[GoalsSnapshot, dict], None]

def _create_event(
    event_type: GoalEventType,
    **kwargs,
) -> dict:
    return {
        "event_type": event_type.value,
        **kwargs,
    }

class GoalRegistry:
    """
    Хранилище целей пользователя.

    Держит неизменяемый снимок целей, заменяет его целиком при каждом
    изменении и синхронно уведомляет подписчиков.
    """

    def __init__(self, goals: list[api_schemas.Goal] | None = None):
        self._goals: GoalsSnapshot = tuple(goals or ())
        self._listeners: list[GoalsListener] = []

    @property
    def goals(self) -> GoalsSnapshot:
        return self._goals

    def get(self, goal_id: str) -> api_schemas.Goal:
        for goal in self._goals:
            if goal.id == goal_id:
                return goal
        raise exceptions.GoalNotFoundError("Goal not found")

    def find(self, goal_id: str) -> api_schemas.Goal | None:
        return next((g for g in self._goals if g.id == goal_id), None)

    def total_balance(self) -> Decimal:
        return allocation.total_balance(self._goals)

    def subscribe(self, listener: GoalsListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def add_goal(self, request: api_schemas.CreateGoalRequest) -> api_schemas.Goal:
        data = request.model_dump(exclude_none=True)
        if "id" in data and self.find(data["id"]) is not None:
            raise exceptions.InvalidGoalDataError("Goal with this id already exists")

        goal = api_schemas.Goal(**data, current_amount=Decimal("0"))
        self._commit(
            self._goals + (goal,),
            _create_event(
                GoalEventType.CREATED,
                goal_id=goal.id,
                name=goal.name,
                target_amount=goal.target_amount,
            ),
        )
        logger.info("Goal %s created", goal.id)
        return goal

    def update_goal(
        self,
        goal_id: str,
        request: api_schemas.GoalPatchRequest,
    ) -> api_schemas.Goal:
        goal = self.get(goal_id)

        changes: dict = {}
        for field, value in request.model_dump(exclude_unset=True).items():
            if value is None:
                continue
            if isinstance(value, str):
                value = value.strip()
                if not value:
                    raise exceptions.InvalidGoalDataError(f"{field} must not be blank")
            changes[field] = value

        if not changes:
            return goal

        return self._replace(
            goal.model_copy(update=changes),
            _create_event(GoalEventType.CHANGED, goal_id=goal_id, changes=changes),
        )

    def set_allocation_type(
        self,
        goal_id: str,
        allocation_type: AllocationType | str,
    ) -> api_schemas.Goal:
        try:
            allocation_type = AllocationType(allocation_type)
        except ValueError:
            raise exceptions.InvalidGoalDataError(
                f"Unknown allocation type: {allocation_type}"
            )
        return self.update_goal(
            goal_id,
            api_schemas.GoalPatchRequest(allocation_type=allocation_type),
        )

    def set_allocation_value(self, goal_id: str, value: Any) -> api_schemas.Goal:
        amount = allocation.to_amount(value)
        if amount is None or amount < 0:
            raise exceptions.InvalidGoalDataError(
                "Allocation value must be a non-negative number"
            )
        return self.update_goal(
            goal_id,
            api_schemas.GoalPatchRequest(allocation_value=amount),
        )

    def remove_goal(self, goal_id: str) -> None:
        self.get(goal_id)
        self._commit(
            tuple(g for g in self._goals if g.id != goal_id),
            _create_event(GoalEventType.DELETED, goal_id=goal_id),
        )
        logger.info("Goal %s deleted", goal_id)

    def reset(self) -> None:
        count = len(self._goals)
        self._commit((), _create_event(GoalEventType.RESET, removed=count))
        logger.info("Goals reset, %s removed", count)

    def distribute(self, amount: Any) -> GoalsSnapshot:
        before = self._goals
        after = allocation.distribute(before, amount)
        if after == before:
            return before

        value = allocation.to_amount(amount)
        if not before:
            metrics.ALLOCATION_FALLBACK_TOTAL.labels(policy="cold_start").inc()
        elif all(allocation.requested_share(g, value) <= 0 for g in before):
            metrics.ALLOCATION_FALLBACK_TOTAL.labels(policy="equal_split").inc()

        metrics.DEPOSITS_DISTRIBUTED_TOTAL.inc()
        metrics.DEPOSIT_AMOUNT.observe(float(value))

        self._commit(
            after,
            _create_event(
                GoalEventType.DEPOSITED,
                amount=value,
                credited=self._balance_changes(before, after),
            ),
        )
        return after

    def deduct_from_goal(self, goal_id: str, amount: Any) -> GoalsSnapshot:
        before = self._goals
        after = allocation.deduct_from_goal(before, goal_id, amount)
        if after == before:
            return before

        metrics.DEDUCTIONS_TOTAL.labels(mode="goal").inc()
        self._commit(
            after,
            _create_event(
                GoalEventType.DEDUCTED,
                goal_id=goal_id,
                amount=allocation.to_amount(amount),
                debited=self._balance_changes(before, after),
            ),
        )
        return after

    def deduct_from_total(self, amount: Any) -> GoalsSnapshot:
        before = self._goals
        after = allocation.deduct_from_total(before, amount)
        if after == before:
            return before

        metrics.DEDUCTIONS_TOTAL.labels(mode="total").inc()
        self._commit(
            after,
            _create_event(
                GoalEventType.DEDUCTED,
                goal_id=None,
                amount=allocation.to_amount(amount),
                debited=self._balance_changes(before, after),
            ),
        )
        return after

    def export(self) -> str:
        """Сериализует текущий снимок целей в JSON строку."""
        return serialization.to_json_str(list(self._goals))

    @staticmethod
    def _balance_changes(before: GoalsSnapshot, after: GoalsSnapshot) -> dict:
        previous = {g.id: g.current_amount for g in before}
        return {
            g.id: abs(g.current_amount - previous.get(g.id, Decimal("0")))
            for g in after
            if g.current_amount != previous.get(g.id, Decimal("0"))
        }

    def _replace(self, goal: api_schemas.Goal, event: dict) -> api_schemas.Goal:
        self._commit(
            tuple(goal if g.id == goal.id else g for g in self._goals),
            event,
        )
        return goal

    def _commit(self, goals: GoalsSnapshot, event: dict) -> None:
        before = {g.id: g for g in self._goals}
        self._goals = goals
        self._notify(event)

        for goal in goals:
            previous = before.get(goal.id)
            if goal.is_achieved and (previous is None or not previous.is_achieved):
                logger.info("Goal %s achieved", goal.id)
                self._notify(
                    _create_event(
                        GoalEventType.ACHIEVED,
                        goal_id=goal.id,
                        current_amount=goal.current_amount,
                        target_amount=goal.target_amount,
                    )
                )

    def _notify(self, event: dict) -> None:
        for listener in list(self._listeners):
            listener(self._goals, event)
