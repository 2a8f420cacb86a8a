"""
Multi-Signature Vault - quorum-approved custody of a shared fund
"""

from .wallet import MultiSigWallet
from .owners import OwnerRegistry
from .config import WalletConfig
from .ledger import TransactionLedger, Transaction, TransactionStatus
from .effects import EffectDispatcher
from .events import (
    EventLog, Deposit, TransactionSubmitted, TransactionConfirmed,
    TransactionExecuted, ExecutionFailure
)
from .identity import OwnerKey, NULL_IDENTITY, is_null_identity, verify_signature
from .exceptions import (
    VaultError, InvalidConfiguration, InvalidTransaction, Unauthorized,
    NotFound, AlreadyExecuted, AlreadyConfirmedByCaller,
    InsufficientConfirmations, ExecutionFailed
)

__version__ = "0.1.0"
__all__ = [
    "MultiSigWallet",
    "OwnerRegistry",
    "WalletConfig",
    "TransactionLedger",
    "Transaction",
    "TransactionStatus",
    "EffectDispatcher",
    "EventLog",
    "Deposit",
    "TransactionSubmitted",
    "TransactionConfirmed",
    "TransactionExecuted",
    "ExecutionFailure",
    "OwnerKey",
    "NULL_IDENTITY",
    "is_null_identity",
    "verify_signature",
    "VaultError",
    "InvalidConfiguration",
    "InvalidTransaction",
    "Unauthorized",
    "NotFound",
    "AlreadyExecuted",
    "AlreadyConfirmedByCaller",
    "InsufficientConfirmations",
    "ExecutionFailed"
]
