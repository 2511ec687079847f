"""
Threshold Wallet - M-of-N owner authorization for arbitrary actions.

This package provides the transaction lifecycle of a multi-owner wallet:
- Submission of transactions (recipient, value, opaque payload)
- One approval per owner per transaction
- Exactly-once execution of the action when the approval threshold is met
- Recorded, non-raising execution failures with explicit retry
- Ordered notifications for every state transition

Example usage:
    from threshold_wallet import (
        MultisigController,
        ValueVault,
        EventLog,
    )

    vault = ValueVault(balance=100)
    wallet = MultisigController(["alice", "bob", "carol"], 2, action=vault)
    tx_id = wallet.submit("alice", "0xrecipient", 1, b"memo")
    wallet.approve("bob", tx_id)
"""

from .actions import (
    Action,
    ActionResult,
    CallableAction,
    TransferRecord,
    ValueVault,
)
from .approvals import ApprovalEngine
from .config import ZERO_ADDRESS, WalletSettings, load_settings
from .controller import MultisigController
from .events import EventLog, Notification, NotificationHandler, NotificationType
from .exceptions import (
    AlreadyApproved,
    AlreadyExecuted,
    DuplicateOwner,
    InvalidOwner,
    InvalidPayload,
    InvalidThreshold,
    InvalidValue,
    NotAnOwner,
    QuorumNotReached,
    ThresholdExceedsOwners,
    ThresholdWalletError,
    TransactionNotFound,
    WalletAuthorizationError,
    WalletConfigurationError,
    WalletConflictError,
    WalletNotFoundError,
    WalletValidationError,
    ZeroRecipient,
)
from .execution import ExecutionEngine
from .ledger import Transaction, TransactionLedger, TransactionStatus
from .logging_config import LogContext, setup_logging, setup_logging_from_settings
from .owners import OwnerAuthority, OwnerRegistry

__version__ = "0.1.0"

__all__ = [
    # Controller
    "MultisigController",

    # Components
    "OwnerAuthority",
    "OwnerRegistry",
    "Transaction",
    "TransactionLedger",
    "TransactionStatus",
    "ApprovalEngine",
    "ExecutionEngine",

    # Actions
    "Action",
    "ActionResult",
    "CallableAction",
    "TransferRecord",
    "ValueVault",

    # Notifications
    "EventLog",
    "Notification",
    "NotificationHandler",
    "NotificationType",

    # Configuration & logging
    "WalletSettings",
    "load_settings",
    "ZERO_ADDRESS",
    "LogContext",
    "setup_logging",
    "setup_logging_from_settings",

    # Errors
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
