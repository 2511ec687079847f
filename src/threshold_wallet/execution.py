"""Quorum check and action invocation."""
from __future__ import annotations

import logging
from typing import Optional

from .actions import Action, ActionResult
from .events import EventLog, NotificationType
from .exceptions import AlreadyExecuted, QuorumNotReached
from .ledger import TransactionLedger
from .owners import OwnerAuthority

logger = logging.getLogger(__name__)


class ExecutionEngine:
    """
    Runs a transaction's action once it has enough approvals.

    The executed flag is set before the action is invoked and is only
    cleared again when the action reports failure. An action that re-enters
    the wallet for the same transaction therefore sees it as executed.

    Action failures are recorded on the transaction and announced with an
    ExecuteError notification. They are never raised to the caller.
    """

    def __init__(
        self,
        authority: OwnerAuthority,
        ledger: TransactionLedger,
        action: Action,
        events: EventLog,
    ) -> None:
        self._authority = authority
        self._ledger = ledger
        self._action = action
        self._events = events

    def quorum_reached(self, transaction_id: int) -> bool:
        return self._ledger.get(transaction_id).approval_count >= self._authority.required

    def maybe_execute(self, transaction_id: int, retry_failed: bool = True) -> Optional[bool]:
        """
        Execute the transaction if it has reached quorum.

        Args:
            transaction_id: Transaction to check
            retry_failed: Re-attempt a transaction whose last attempt failed

        Returns:
            None when nothing was attempted, otherwise whether the action succeeded
        """
        tx = self._ledger.get(transaction_id)
        if tx.executed or not self.quorum_reached(transaction_id):
            return None
        if tx.failed and not retry_failed:
            logger.debug(f"Transaction {transaction_id} failed earlier, not retrying")
            return None
        return self._attempt(transaction_id)

    def execute(self, transaction_id: int) -> bool:
        """Explicitly (re)attempt a transaction that has reached quorum."""
        tx = self._ledger.get(transaction_id)
        if tx.executed:
            raise AlreadyExecuted(transaction_id)
        if not self.quorum_reached(transaction_id):
            raise QuorumNotReached(transaction_id, tx.approval_count, self._authority.required)
        return self._attempt(transaction_id)

    def _attempt(self, transaction_id: int) -> bool:
        tx = self._ledger.get(transaction_id)

        # Must happen before control leaves the wallet
        self._ledger.set_executed(transaction_id, True)

        try:
            result = self._action.execute(tx.recipient, tx.value, tx.payload)
        except Exception as e:
            logger.warning(
                f"Action raised for transaction {transaction_id}: {e}",
                exc_info=True,
            )
            result = ActionResult.fail(f"{type(e).__name__}: {e}")

        if not isinstance(result, ActionResult):
            result = ActionResult.fail(f"action returned {type(result).__name__}, not ActionResult")

        if result.success:
            self._ledger.mark_completed(transaction_id)
            self._events.emit(NotificationType.EXECUTE, transaction_id=transaction_id)
            logger.info(f"Executed transaction {transaction_id}")
            return True

        self._ledger.set_executed(transaction_id, False, reason=result.reason)
        self._events.emit(
            NotificationType.EXECUTE_ERROR,
            transaction_id=transaction_id,
            reason=result.reason,
        )
        logger.warning(f"Transaction {transaction_id} execution failed: {result.reason}")
        return False


__all__ = ["ExecutionEngine"]
