"""
Actions executed once a transaction reaches quorum.

The wallet core never moves value itself. Hosts hand it an Action that
performs "transfer value to recipient and deliver payload" and reports the
outcome. Two implementations ship with the package:

- CallableAction: adapts a plain function
- ValueVault: in-memory balance keeper, useful for simulations and tests
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Protocol, Set, runtime_checkable

from .events import EventLog, NotificationType
from .exceptions import InvalidValue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActionResult:
    """Outcome of one action invocation."""
    success: bool
    reason: Optional[str] = None
    data: Any = None

    @classmethod
    def ok(cls, data: Any = None) -> "ActionResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, reason: str) -> "ActionResult":
        return cls(success=False, reason=reason)


@runtime_checkable
class Action(Protocol):
    """Protocol for executing approved transactions."""

    def execute(self, recipient: str, value: int, payload: bytes) -> ActionResult:
        """Perform the transfer and deliver the payload."""
        ...


class CallableAction:
    """Wrap a function as an Action.

    The function may return an ActionResult, a bool, or None (treated as
    success). Exceptions propagate to the execution engine, which records them
    as failures.
    """

    def __init__(self, func: Callable[[str, int, bytes], Any]) -> None:
        self._func = func

    def execute(self, recipient: str, value: int, payload: bytes) -> ActionResult:
        result = self._func(recipient, value, payload)
        if isinstance(result, ActionResult):
            return result
        if result is None or result is True:
            return ActionResult.ok()
        if result is False:
            return ActionResult.fail("action returned False")
        return ActionResult.ok(data=result)

    def __repr__(self) -> str:
        return f"CallableAction({getattr(self._func, '__name__', self._func)!r})"


@dataclass
class TransferRecord:
    """A completed value transfer out of the vault."""
    recipient: str
    value: int
    payload: bytes
    executed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recipient": self.recipient,
            "value": self.value,
            "payload": self.payload.hex(),
            "executed_at": self.executed_at.isoformat(),
        }


class ValueVault:
    """
    In-memory wallet balance used as the execution action.

    Transfers fail (without raising) when the balance is too low or when the
    recipient has been registered as refusing transfers.
    """

    def __init__(self, balance: int = 0, events: Optional[EventLog] = None) -> None:
        if not isinstance(balance, int) or isinstance(balance, bool) or balance < 0:
            raise InvalidValue(balance)
        self._balance = balance
        self._events = events
        self._credits: Dict[str, int] = {}
        self._rejecting: Set[str] = set()
        self._transfers: List[TransferRecord] = []

    @property
    def balance(self) -> int:
        return self._balance

    @property
    def transfers(self) -> List[TransferRecord]:
        return list(self._transfers)

    def bind_events(self, events: EventLog) -> None:
        """Announce deposits on the given event log."""
        self._events = events

    def deposit(self, sender: str, value: int) -> int:
        """Add funds to the vault. Returns the new balance."""
        if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
            raise InvalidValue(value)
        self._balance += value
        if self._events is not None:
            self._events.emit(NotificationType.DEPOSIT, sender=sender, value=value)
        logger.info(f"Deposit of {value} from {sender}, balance {self._balance}")
        return self._balance

    def reject_transfers_to(self, recipient: str) -> None:
        self._rejecting.add(recipient)

    def accept_transfers_to(self, recipient: str) -> None:
        self._rejecting.discard(recipient)

    def received_by(self, recipient: str) -> int:
        """Total value transferred to a recipient."""
        return self._credits.get(recipient, 0)

    def execute(self, recipient: str, value: int, payload: bytes) -> ActionResult:
        if recipient in self._rejecting:
            return ActionResult.fail(f"recipient {recipient} rejected the transfer")
        if value > self._balance:
            return ActionResult.fail(
                f"insufficient balance: {self._balance} available, {value} requested"
            )

        self._balance -= value
        self._credits[recipient] = self._credits.get(recipient, 0) + value
        record = TransferRecord(recipient=recipient, value=value, payload=payload)
        self._transfers.append(record)
        return ActionResult.ok(data=record)


__all__ = [
    "ActionResult",
    "Action",
    "CallableAction",
    "TransferRecord",
    "ValueVault",
]
