"""Wallet notifications.

Every state transition of the wallet is announced as a Notification. The
EventLog keeps them in emission order and fans them out to subscribers.

Example:
    log = EventLog()
    log.subscribe("execute*", on_execution)

    controller = MultisigController(owners, 2, action=vault, events=log)
    controller.submit(owner, recipient, 1)

    [n.event_type for n in log.notifications]
    # [NotificationType.SUBMISSION, NotificationType.APPROVE]
"""
from __future__ import annotations

import fnmatch
import logging
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Deque, Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)


class NotificationType(str, Enum):
    """Observable wallet events."""
    SUBMISSION = "submission"
    APPROVE = "approve"
    EXECUTE = "execute"
    EXECUTE_ERROR = "execute_error"
    DEPOSIT = "deposit"


@dataclass(frozen=True)
class Notification:
    """A single emitted event."""
    event_type: NotificationType
    transaction_id: Optional[int] = None
    approver: Optional[str] = None
    sender: Optional[str] = None
    value: Optional[int] = None
    reason: Optional[str] = None
    sequence: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, omitting fields the event does not carry."""
        data: Dict[str, Any] = {
            "event_type": self.event_type.value,
            "sequence": self.sequence,
            "created_at": self.created_at.isoformat(),
        }
        for name in ("transaction_id", "approver", "sender", "value", "reason"):
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        return data


NotificationHandler = Callable[[Notification], Any]


class EventLog:
    """Ordered record of notifications with pattern subscriptions.

    Handlers run synchronously in subscription order, in emission order. While
    a wallet call is in progress delivery is deferred until it returns. A
    failing handler is logged and never interrupts the wallet call
    that emitted the notification.
    """

    def __init__(self) -> None:
        self._notifications: List[Notification] = []
        self._subscribers: Dict[str, List[NotificationHandler]] = {}
        self._pending: Deque[Notification] = deque()
        self._depth = 0

    @property
    def notifications(self) -> List[Notification]:
        return list(self._notifications)

    def __len__(self) -> int:
        return len(self._notifications)

    def subscribe(self, event_pattern: str, handler: NotificationHandler) -> None:
        """Subscribe to notifications matching a pattern.

        Args:
            event_pattern: Event type or pattern (supports wildcards like 'execute*')
            handler: Callable that receives the Notification
        """
        handlers = self._subscribers.setdefault(event_pattern, [])
        if handler not in handlers:
            handlers.append(handler)
            logger.debug(f"Subscribed {_handler_name(handler)} to {event_pattern}")

    def unsubscribe(self, event_pattern: str, handler: NotificationHandler) -> None:
        """Remove a subscription."""
        handlers = self._subscribers.get(event_pattern)
        if not handlers or handler not in handlers:
            return
        handlers.remove(handler)
        if not handlers:
            del self._subscribers[event_pattern]
        logger.debug(f"Unsubscribed {_handler_name(handler)} from {event_pattern}")

    def emit(self, event_type: NotificationType, **fields: Any) -> Notification:
        """Record a notification and deliver it to matching subscribers.

        Inside a deferred() block delivery waits until the outermost block
        exits; the notification is recorded immediately either way.
        """
        notification = Notification(
            event_type=event_type,
            sequence=len(self._notifications),
            **fields,
        )
        self._notifications.append(notification)
        self._pending.append(notification)
        if not self._depth:
            self._flush()
        return notification

    @contextmanager
    def deferred(self) -> Iterator["EventLog"]:
        """Hold handler delivery until the outermost block exits.

        Handlers then see a wallet whose call has fully completed, so they
        may call back into it.
        """
        self._depth += 1
        try:
            yield self
        finally:
            self._depth -= 1
            if not self._depth:
                self._flush()

    def _flush(self) -> None:
        # Handlers may emit again; those land on the same queue in order.
        self._depth += 1
        try:
            while self._pending:
                self._dispatch(self._pending.popleft())
        finally:
            self._depth -= 1

    def _dispatch(self, notification: Notification) -> None:
        event_type = notification.event_type
        matching = [
            handler
            for pattern, handlers in self._subscribers.items()
            if fnmatch.fnmatch(event_type.value, pattern)
            for handler in handlers
        ]
        for handler in matching:
            try:
                handler(notification)
            except Exception as e:
                logger.error(
                    f"Handler {_handler_name(handler)} failed for {event_type.value}: {e}",
                    exc_info=True,
                )

        logger.debug(f"Emitted {event_type.value} to {len(matching)} handlers")

    def for_transaction(self, transaction_id: int) -> List[Notification]:
        """Notifications that concern one transaction, in emission order."""
        return [n for n in self._notifications if n.transaction_id == transaction_id]

    def of_type(self, event_type: NotificationType) -> List[Notification]:
        return [n for n in self._notifications if n.event_type == event_type]


def _handler_name(handler: Callable) -> str:
    return getattr(handler, "__name__", repr(handler))


__all__ = [
    "NotificationType",
    "Notification",
    "NotificationHandler",
    "EventLog",
]
