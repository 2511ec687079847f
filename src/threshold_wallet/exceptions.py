"""Unified exception hierarchy for threshold wallets.

All wallet exceptions inherit from ThresholdWalletError, enabling:
- Consistent error handling for hosts embedding the controller
- Structured error payloads with machine-readable codes
- Category bases for catching a whole class of rejections at once

Usage:
    from threshold_wallet.exceptions import (
        ThresholdWalletError,
        NotAnOwner,
        AlreadyApproved,
    )

    try:
        controller.approve(caller, tx_id)
    except WalletAuthorizationError as e:
        return e.to_dict()

All exceptions have:
- error_code: Machine-readable error code (e.g., "NOT_AN_OWNER")
- message: Human-readable error message
- details: Optional additional context dictionary
- to_dict(): Convert to a response payload

Action failures during execution are never raised; they are recorded on the
transaction and announced through an ExecuteError notification.
"""
from __future__ import annotations

from typing import Any, Optional


class ThresholdWalletError(Exception):
    """Base exception for all threshold wallet errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code
        details: Optional additional context
    """

    error_code: str = "WALLET_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a response payload."""
        result = {
            "error": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Category bases
# =============================================================================

class WalletConfigurationError(ThresholdWalletError):
    """Wallet cannot be constructed from the given owners and threshold."""

    error_code = "CONFIGURATION_ERROR"


class WalletAuthorizationError(ThresholdWalletError):
    """Caller is not allowed to perform the operation."""

    error_code = "AUTHORIZATION_ERROR"


class WalletConflictError(ThresholdWalletError):
    """Operation conflicts with the current transaction state."""

    error_code = "CONFLICT"


class WalletValidationError(ThresholdWalletError):
    """Invalid input data or parameters."""

    error_code = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details=details)


class WalletNotFoundError(ThresholdWalletError):
    """Requested resource not found."""

    error_code = "NOT_FOUND"

    def __init__(
        self,
        resource_type: str,
        resource_id: Any,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        message = f"{resource_type} '{resource_id}' not found"
        details = details or {}
        details["resource_type"] = resource_type
        details["resource_id"] = resource_id
        super().__init__(message, details=details)


# =============================================================================
# Construction errors
# =============================================================================

class InvalidThreshold(WalletConfigurationError):
    """Required approvals must be at least one."""

    error_code = "INVALID_THRESHOLD"

    def __init__(self, required: int) -> None:
        super().__init__(
            f"Required approvals must be at least 1, got {required}",
            details={"required": required},
        )


class ThresholdExceedsOwners(WalletConfigurationError):
    """Required approvals exceed the number of owners."""

    error_code = "THRESHOLD_EXCEEDS_OWNERS"

    def __init__(self, required: int, owner_count: int) -> None:
        super().__init__(
            f"Required approvals ({required}) exceed owner count ({owner_count})",
            details={"required": required, "owner_count": owner_count},
        )


class DuplicateOwner(WalletConfigurationError):
    """The same identity appears more than once in the owner list."""

    error_code = "DUPLICATE_OWNER"

    def __init__(self, owner: str) -> None:
        super().__init__(f"Duplicate owner {owner}", details={"owner": owner})


class InvalidOwner(WalletConfigurationError):
    """Owner identity is empty or the null identity."""

    error_code = "INVALID_OWNER"

    def __init__(self, owner: Any) -> None:
        super().__init__(f"Invalid owner identity {owner!r}", details={"owner": repr(owner)})


# =============================================================================
# Authorization errors
# =============================================================================

class NotAnOwner(WalletAuthorizationError):
    """Caller is not one of the wallet owners."""

    error_code = "NOT_AN_OWNER"

    def __init__(self, caller: Any) -> None:
        super().__init__(f"{caller} is not an owner", details={"caller": caller})


# =============================================================================
# State-conflict errors
# =============================================================================

class AlreadyApproved(WalletConflictError):
    """Owner already approved this transaction."""

    error_code = "ALREADY_APPROVED"

    def __init__(self, transaction_id: int, owner: str) -> None:
        super().__init__(
            f"Transaction {transaction_id} already approved by {owner}",
            details={"transaction_id": transaction_id, "owner": owner},
        )


class AlreadyExecuted(WalletConflictError):
    """Transaction has already been executed."""

    error_code = "ALREADY_EXECUTED"

    def __init__(self, transaction_id: int) -> None:
        super().__init__(
            f"Transaction {transaction_id} already executed",
            details={"transaction_id": transaction_id},
        )


class QuorumNotReached(WalletConflictError):
    """Explicit retry requested before the transaction reached quorum."""

    error_code = "QUORUM_NOT_REACHED"

    def __init__(self, transaction_id: int, approval_count: int, required: int) -> None:
        super().__init__(
            f"Transaction {transaction_id} has {approval_count} of {required} approvals",
            details={
                "transaction_id": transaction_id,
                "approval_count": approval_count,
                "required": required,
            },
        )


# =============================================================================
# Validation errors
# =============================================================================

class ZeroRecipient(WalletValidationError):
    """Recipient is the null identity."""

    error_code = "ZERO_RECIPIENT"

    def __init__(self) -> None:
        super().__init__("Recipient must not be the null identity", field="recipient")


class InvalidValue(WalletValidationError):
    """Value must be a non-negative integer."""

    error_code = "INVALID_VALUE"

    def __init__(self, value: Any) -> None:
        super().__init__(
            f"Value must be a non-negative integer, got {value!r}",
            field="value",
        )


class InvalidPayload(WalletValidationError):
    """Payload must be a byte sequence within the configured size limit."""

    error_code = "INVALID_PAYLOAD"

    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid payload: {reason}", field="payload")


# =============================================================================
# Lookup errors
# =============================================================================

class TransactionNotFound(WalletNotFoundError):
    """Transaction id was never assigned."""

    error_code = "TRANSACTION_NOT_FOUND"

    def __init__(self, transaction_id: Any) -> None:
        super().__init__("Transaction", transaction_id)


__all__ = [
    "ThresholdWalletError",
    "WalletConfigurationError",
    "WalletAuthorizationError",
    "WalletConflictError",
    "WalletValidationError",
    "WalletNotFoundError",
    "InvalidThreshold",
    "ThresholdExceedsOwners",
    "DuplicateOwner",
    "InvalidOwner",
    "NotAnOwner",
    "AlreadyApproved",
    "AlreadyExecuted",
    "QuorumNotReached",
    "ZeroRecipient",
    "InvalidValue",
    "InvalidPayload",
    "TransactionNotFound",
]
