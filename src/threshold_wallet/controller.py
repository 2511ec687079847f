"""
Threshold multi-owner wallet controller.

Public entry point composing the owner registry, transaction ledger,
approval engine and execution engine.

Lifecycle of a transaction:
- submit: an owner proposes (recipient, value, payload); the submitter's
  approval is recorded immediately
- approve: further owners approve, one vote each
- once approvals reach the threshold the action runs exactly once; a
  failed attempt clears the executed flag and can be re-attempted either
  by a further approval or explicitly through retry_execute

Example:
    vault = ValueVault(balance=10)
    wallet = MultisigController(["alice", "bob", "carol"], 2, action=vault)

    tx_id = wallet.submit("alice", "0xrecipient", 1, b"")
    wallet.approve("bob", tx_id)

    wallet.get_transaction(tx_id).executed  # True
"""
from __future__ import annotations

import logging
import threading
from typing import List, Optional, Sequence, Tuple

from .actions import Action, ValueVault
from .approvals import ApprovalEngine
from .config import WalletSettings, load_settings
from .events import EventLog
from .exceptions import (
    InvalidPayload,
    InvalidValue,
    NotAnOwner,
    ZeroRecipient,
)
from .execution import ExecutionEngine
from .ledger import Transaction, TransactionLedger
from .logging_config import LogContext, bind_transaction
from .owners import OwnerAuthority, OwnerRegistry

logger = logging.getLogger(__name__)


class MultisigController:
    """
    Orchestrates submission, approval and execution of wallet transactions.

    All public mutations are serialized by one re-entrant lock guarding the
    whole ledger. Re-entrant so that an action may call back into the wallet
    for a different transaction.
    """

    def __init__(
        self,
        owners: Sequence[str],
        required: int,
        *,
        action: Optional[Action] = None,
        events: Optional[EventLog] = None,
        settings: Optional[WalletSettings] = None,
    ) -> None:
        settings = settings or load_settings()
        self._setup(OwnerRegistry(owners, required, settings), action, events, settings)

    @classmethod
    def from_authority(
        cls,
        authority: OwnerAuthority,
        *,
        action: Optional[Action] = None,
        events: Optional[EventLog] = None,
        settings: Optional[WalletSettings] = None,
    ) -> "MultisigController":
        """Build a controller around an alternate source of owner membership."""
        controller = cls.__new__(cls)
        controller._setup(authority, action, events, settings or load_settings())
        return controller

    def _setup(
        self,
        authority: OwnerAuthority,
        action: Optional[Action],
        events: Optional[EventLog],
        settings: WalletSettings,
    ) -> None:
        self._settings = settings
        self._authority = authority
        self._events = events if events is not None else EventLog()
        if action is None:
            action = ValueVault(events=self._events)
        self._action = action

        self._lock = threading.RLock()
        self._ledger = TransactionLedger(self._events)
        self._approvals = ApprovalEngine(authority, self._ledger, self._events)
        self._execution = ExecutionEngine(authority, self._ledger, action, self._events)

        logger.info(
            f"Multi-sig wallet ready: {len(self.owners) or 'external'} owners, "
            f"{authority.required} required"
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def submit(
        self,
        caller: str,
        recipient: str,
        value: int,
        payload: bytes = b"",
    ) -> int:
        """
        Propose a transaction. Submission counts as the caller's approval.

        Args:
            caller: Authenticated caller identity
            recipient: Target of the transfer
            value: Amount to transfer, may be zero
            payload: Opaque data delivered with the transfer

        Returns:
            The new transaction id

        Raises:
            NotAnOwner: caller is not an owner
            ZeroRecipient: recipient is the null identity
            InvalidValue: value is negative or not an integer
            InvalidPayload: payload is not bytes or is too large
        """
        with self._lock, self._events.deferred(), LogContext(caller=caller):
            if not self._authority.is_owner(caller):
                logger.warning(f"Rejected submission from non-owner {caller}")
                raise NotAnOwner(caller)
            if not isinstance(recipient, str) or self._settings.is_null_identity(recipient):
                raise ZeroRecipient()
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise InvalidValue(value)
            payload = self._check_payload(payload)

            transaction_id = self._ledger.create(recipient, value, payload, submitted_by=caller)
            bind_transaction(transaction_id)
            self._approvals.record_approval(transaction_id, caller)
            self._execution.maybe_execute(
                transaction_id,
                retry_failed=self._settings.retry_on_approval,
            )
            return transaction_id

    def approve(self, caller: str, transaction_id: int) -> None:
        """
        Approve a transaction and execute it if quorum is reached.

        Execution failures are not raised; they are visible through the
        ExecuteError notification and the transaction's executed flag.

        Raises:
            NotAnOwner: caller is not an owner
            TransactionNotFound: unknown transaction id
            AlreadyApproved: caller already approved
            AlreadyExecuted: transaction already executed
        """
        with self._lock, self._events.deferred(), \
                LogContext(caller=caller, transaction_id=transaction_id):
            self._approvals.record_approval(transaction_id, caller)
            self._execution.maybe_execute(
                transaction_id,
                retry_failed=self._settings.retry_on_approval,
            )

    def retry_execute(self, caller: str, transaction_id: int) -> bool:
        """
        Explicitly re-attempt a transaction that reached quorum but failed.

        Returns:
            Whether the action succeeded this time

        Raises:
            NotAnOwner: caller is not an owner
            TransactionNotFound: unknown transaction id
            AlreadyExecuted: transaction already executed
            QuorumNotReached: not enough approvals yet
        """
        with self._lock, self._events.deferred(), \
                LogContext(caller=caller, transaction_id=transaction_id):
            if not self._authority.is_owner(caller):
                raise NotAnOwner(caller)
            logger.info(f"Retry of transaction {transaction_id} requested by {caller}")
            return self._execution.execute(transaction_id)

    def _check_payload(self, payload: bytes) -> bytes:
        if payload is None:
            return b""
        if not isinstance(payload, (bytes, bytearray, memoryview)):
            raise InvalidPayload(f"expected bytes, got {type(payload).__name__}")
        payload = bytes(payload)
        limit = self._settings.max_payload_bytes
        if limit and len(payload) > limit:
            raise InvalidPayload(f"{len(payload)} bytes exceeds limit of {limit}")
        return payload

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def owners(self) -> Tuple[str, ...]:
        return tuple(getattr(self._authority, "owners", ()))

    @property
    def required(self) -> int:
        return self._authority.required

    @property
    def events(self) -> EventLog:
        return self._events

    @property
    def action(self) -> Action:
        return self._action

    def is_owner(self, identity: str) -> bool:
        return self._authority.is_owner(identity)

    def get_transaction(self, transaction_id: int) -> Transaction:
        """Snapshot of a transaction; mutating it does not affect the wallet."""
        with self._lock:
            return self._ledger.snapshot(transaction_id)

    def transaction_count(self, pending: bool = True, executed: bool = True) -> int:
        """Number of transactions, filtered by execution state."""
        with self._lock:
            return len(self.transaction_ids(pending=pending, executed=executed))

    def transaction_ids(self, pending: bool = True, executed: bool = True) -> List[int]:
        with self._lock:
            return [
                tx.transaction_id
                for tx in self._ledger
                if (pending and not tx.executed) or (executed and tx.executed)
            ]

    def approval_count(self, transaction_id: int) -> int:
        with self._lock:
            return self._ledger.get(transaction_id).approval_count

    def has_approved(self, transaction_id: int, owner: str) -> bool:
        with self._lock:
            self._ledger.get(transaction_id)
            return self._approvals.has_approved(transaction_id, owner)

    def get_approvals(self, transaction_id: int) -> List[str]:
        """Owners who approved a transaction, in owner-list order."""
        with self._lock:
            self._ledger.get(transaction_id)
            owners = list(self.owners)
            if owners:
                return self._approvals.ordered_approvers(transaction_id, owners)
            return sorted(self._approvals.approvers(transaction_id))

    def is_confirmed(self, transaction_id: int) -> bool:
        """Whether the transaction has reached quorum."""
        with self._lock:
            return self._execution.quorum_reached(transaction_id)

    def is_stuck(self, transaction_id: int) -> bool:
        """
        Quorum reached, last attempt failed, and no further approval can
        re-attempt it: either retry_on_approval is off or every owner has
        already approved.

        Such a transaction can only move forward through retry_execute.
        """
        with self._lock:
            tx = self._ledger.get(transaction_id)
            if not tx.failed or not self._execution.quorum_reached(transaction_id):
                return False
            if not self._settings.retry_on_approval:
                return True
            owners = self.owners
            if not owners:
                return False
            return all(self._approvals.has_approved(transaction_id, o) for o in owners)

    def __repr__(self) -> str:
        return (
            f"MultisigController(owners={len(self.owners)}, required={self.required}, "
            f"transactions={len(self._ledger)})"
        )


__all__ = ["MultisigController"]
