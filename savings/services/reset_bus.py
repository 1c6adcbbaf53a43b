import logging
from typing import Callable

from savings.core import metrics

logger = logging.getLogger(__name__)

ResetCallback = Callable[[int], None]

class ResetBus:
    """
    Шина сброса демо-данных.

    Подписчики с локальным состоянием (история операций, портфель)
    регистрируют колбэк, reset() вызывает их синхронно в порядке подписки.
    """

    def __init__(self):
        self.reset_key = 0
        self._subscribers: list[ResetCallback] = []

    def subscribe(self, callback: ResetCallback) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def reset(self) -> int:
        self.reset_key += 1
        logger.info(
            "Demo reset #%s, notifying %s subscribers",
            self.reset_key,
            len(self._subscribers),
        )
        for callback in list(self._subscribers):
            callback(self.reset_key)

        metrics.DEMO_RESETS_TOTAL.inc()
        return self.reset_key
