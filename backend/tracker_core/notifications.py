"""In-process change feed: fan-out of row changes keyed by (table, equipment_id).

Published after a successful commit. Notifications carry ids only; observers
re-fetch authoritative state and must tolerate duplicates and reordering.
Delivery is fire-and-forget: an observer that raises is logged and skipped.
"""
import logging
import threading
from dataclasses import asdict, dataclass
from typing import Callable

LOG = logging.getLogger(__name__)

TABLE_CHARGING_SESSION = "charging_session"
TABLE_SWAP_EVENT = "swap_event"


@dataclass(frozen=True)
class ChangeNotification:
    """One row change: table, event ("insert"/"update"), row id and equipment id."""

    table: str
    event: str
    row_id: str
    equipment_id: str

    def to_dict(self) -> dict:
        return asdict(self)


Observer = Callable[[ChangeNotification], None]


class ChangeFeed:
    """Subscriber registry. Safe to publish from request threads."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._observers: dict[tuple[str, str], list[Observer]] = {}

    def subscribe(self, table: str, equipment_id: str, observer: Observer) -> Callable[[], None]:
        """Register an observer for one table and equipment id. Returns an unsubscribe callable."""
        key = (table, equipment_id)
        with self._lock:
            self._observers.setdefault(key, []).append(observer)

        def unsubscribe() -> None:
            with self._lock:
                observers = self._observers.get(key)
                if observers and observer in observers:
                    observers.remove(observer)
                    if not observers:
                        del self._observers[key]

        return unsubscribe

    def publish(self, notification: ChangeNotification) -> int:
        """Deliver to every observer of (table, equipment_id). Returns how many were called."""
        with self._lock:
            observers = list(self._observers.get((notification.table, notification.equipment_id), ()))
        for observer in observers:
            try:
                observer(notification)
            except Exception:
                LOG.exception(
                    "Change observer failed for %s %s (equipment %s)",
                    notification.table,
                    notification.row_id,
                    notification.equipment_id,
                )
        return len(observers)

    def subscriber_count(self, table: str, equipment_id: str) -> int:
        with self._lock:
            return len(self._observers.get((table, equipment_id), ()))

    def clear(self) -> None:
        """Drop all observers (tests)."""
        with self._lock:
            self._observers.clear()


feed = ChangeFeed()


def publish(table: str, event: str, row_id, equipment_id: str) -> int:
    """Publish a change on the process-wide feed."""
    return feed.publish(ChangeNotification(table=table, event=event, row_id=str(row_id), equipment_id=equipment_id))
