"""In-process fan-out of branch balance changes to realtime listeners."""

import logging
import threading
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BalanceChanged:
    branch_id: int
    new_balance: Decimal


Listener = Callable[[BalanceChanged], None]


class BalanceNotifier:
    def __init__(self) -> None:
        self._listeners: list[Listener] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unsubscribes it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def publish(self, branch_id: int, new_balance: Decimal) -> BalanceChanged:
        event = BalanceChanged(branch_id=branch_id, new_balance=new_balance)
        with self._lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(event)
            except Exception:
                # delivery is best-effort; the balance change is already committed
                logger.exception("Balance listener failed for branch %s", branch_id)

        logger.info("Branch %s balance changed to %s", branch_id, new_balance)
        return event


balance_notifier = BalanceNotifier()
