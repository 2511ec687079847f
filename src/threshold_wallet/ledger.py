"""Transaction ledger.

Stores submitted transactions under sequential ids. The ledger only grows:
ids start at 0, increase by one per submission and are never reused.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from .events import EventLog, NotificationType
from .exceptions import TransactionNotFound

logger = logging.getLogger(__name__)


class TransactionStatus(str, Enum):
    """Execution status of a transaction."""
    PENDING = "pending"  # Quorum not reached or never attempted
    EXECUTED = "executed"  # Action ran (or is running) successfully
    FAILED = "failed"  # Last attempt reported failure


@dataclass(slots=True)
class Transaction:
    """A proposed action awaiting quorum."""
    transaction_id: int
    recipient: str
    value: int
    payload: bytes = b""
    submitted_by: Optional[str] = None
    approval_count: int = 0
    status: TransactionStatus = TransactionStatus.PENDING
    attempts: int = 0
    last_error: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    executed_at: Optional[datetime] = None

    @property
    def executed(self) -> bool:
        return self.status == TransactionStatus.EXECUTED

    @property
    def failed(self) -> bool:
        return self.status == TransactionStatus.FAILED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "transaction_id": self.transaction_id,
            "recipient": self.recipient,
            "value": self.value,
            "payload": self.payload.hex(),
            "submitted_by": self.submitted_by,
            "approval_count": self.approval_count,
            "executed": self.executed,
            "status": self.status.value,
            "attempts": self.attempts,
            "last_error": self.last_error,
            "created_at": self.created_at.isoformat(),
            "executed_at": self.executed_at.isoformat() if self.executed_at else None,
        }


class TransactionLedger:
    """Append-only store of transactions keyed by sequential id."""

    def __init__(self, events: Optional[EventLog] = None) -> None:
        self._events = events if events is not None else EventLog()
        self._transactions: List[Transaction] = []

    def create(
        self,
        recipient: str,
        value: int,
        payload: bytes = b"",
        submitted_by: Optional[str] = None,
    ) -> int:
        """
        Store a new transaction and announce it.

        Recipient validation is the caller's job; the ledger stores what it is
        given.

        Returns:
            The assigned transaction id
        """
        transaction_id = len(self._transactions)
        self._transactions.append(
            Transaction(
                transaction_id=transaction_id,
                recipient=recipient,
                value=value,
                payload=bytes(payload),
                submitted_by=submitted_by,
            )
        )
        self._events.emit(NotificationType.SUBMISSION, transaction_id=transaction_id)

        logger.info(f"Transaction {transaction_id} submitted: {value} to {recipient}")
        return transaction_id

    def get(self, transaction_id: int) -> Transaction:
        if (
            not isinstance(transaction_id, int)
            or isinstance(transaction_id, bool)
            or not 0 <= transaction_id < len(self._transactions)
        ):
            raise TransactionNotFound(transaction_id)
        return self._transactions[transaction_id]

    def snapshot(self, transaction_id: int) -> Transaction:
        """Detached copy of a transaction, safe to hand to callers."""
        return replace(self.get(transaction_id))

    def increment_approval_count(self, transaction_id: int) -> int:
        tx = self.get(transaction_id)
        tx.approval_count += 1
        return tx.approval_count

    def set_executed(
        self,
        transaction_id: int,
        executed: bool,
        reason: Optional[str] = None,
    ) -> None:
        """Flip the executed flag.

        Setting it marks the start of an attempt. Clearing it records a failed
        attempt together with its reason.
        """
        tx = self.get(transaction_id)
        if executed:
            tx.status = TransactionStatus.EXECUTED
            tx.attempts += 1
            tx.last_error = None
        else:
            tx.status = TransactionStatus.FAILED
            tx.last_error = reason

    def mark_completed(self, transaction_id: int) -> None:
        self.get(transaction_id).executed_at = datetime.now(timezone.utc)

    def __len__(self) -> int:
        return len(self._transactions)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self._transactions)


__all__ = ["TransactionStatus", "Transaction", "TransactionLedger"]
