"""Toast-style user notifications with a fixed auto-dismiss duration."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum

DISMISS_AFTER = timedelta(seconds=3)


class NotificationKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass
class Notification:
    kind: NotificationKind
    message: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def expires_at(self) -> datetime:
        return self.created_at + DISMISS_AFTER

    def is_active(self, now: datetime) -> bool:
        return now < self.expires_at


class Notifier:
    """Collects notifications; expired ones drop out of ``active()``."""

    def __init__(self):
        self._items: list[Notification] = []

    def notify(self, kind: NotificationKind, message: str) -> Notification:
        notification = Notification(kind=kind, message=message)
        self._items.append(notification)
        return notification

    def success(self, message: str) -> Notification:
        return self.notify(NotificationKind.SUCCESS, message)

    def error(self, message: str) -> Notification:
        return self.notify(NotificationKind.ERROR, message)

    def info(self, message: str) -> Notification:
        return self.notify(NotificationKind.INFO, message)

    def active(self) -> list[Notification]:
        now = datetime.now(timezone.utc)
        self._items = [n for n in self._items if n.is_active(now)]
        return list(self._items)

    @property
    def last(self):
        return self._items[-1] if self._items else None
