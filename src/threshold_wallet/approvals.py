"""Per-owner approval records."""
from __future__ import annotations

import logging
from typing import Dict, List, Set

from .events import EventLog, NotificationType
from .exceptions import AlreadyApproved, AlreadyExecuted, NotAnOwner
from .ledger import TransactionLedger
from .owners import OwnerAuthority

logger = logging.getLogger(__name__)


class ApprovalEngine:
    """
    Records owner approvals against transactions.

    Each (transaction, owner) pair is recorded at most once and can never be
    withdrawn. Validation happens before any mutation, so a rejected approval
    leaves the ledger untouched.
    """

    def __init__(
        self,
        authority: OwnerAuthority,
        ledger: TransactionLedger,
        events: EventLog,
    ) -> None:
        self._authority = authority
        self._ledger = ledger
        self._events = events
        self._approvals: Dict[int, Set[str]] = {}

    def record_approval(self, transaction_id: int, caller: str) -> int:
        """
        Record one owner's approval.

        Args:
            transaction_id: Transaction being approved
            caller: Authenticated caller identity

        Returns:
            Approval count after recording

        Raises:
            NotAnOwner: caller is not an owner
            AlreadyApproved: caller already approved this transaction
            AlreadyExecuted: transaction already executed
        """
        if not self._authority.is_owner(caller):
            raise NotAnOwner(caller)

        tx = self._ledger.get(transaction_id)
        approvers = self._approvals.get(transaction_id, set())
        if caller in approvers:
            raise AlreadyApproved(transaction_id, caller)
        if tx.executed:
            raise AlreadyExecuted(transaction_id)

        self._approvals.setdefault(transaction_id, set()).add(caller)
        count = self._ledger.increment_approval_count(transaction_id)
        self._events.emit(
            NotificationType.APPROVE,
            transaction_id=transaction_id,
            approver=caller,
        )

        logger.info(
            f"Approval recorded for transaction {transaction_id} by {caller} "
            f"({count}/{self._authority.required})"
        )
        return count

    def has_approved(self, transaction_id: int, owner: str) -> bool:
        return owner in self._approvals.get(transaction_id, ())

    def approvers(self, transaction_id: int) -> Set[str]:
        return set(self._approvals.get(transaction_id, ()))

    def ordered_approvers(self, transaction_id: int, owners: List[str]) -> List[str]:
        """Approvers of a transaction in owner-list order."""
        approved = self._approvals.get(transaction_id, set())
        return [owner for owner in owners if owner in approved]


__all__ = ["ApprovalEngine"]
