"""
Vault exception hierarchy

Every guard violation has its own exception type so callers can
present precise diagnostics. All inherit from VaultError.
"""


class VaultError(Exception):
    """Base exception for all vault errors"""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class InvalidConfiguration(VaultError):
    """Raised when owners or threshold are invalid at construction"""
    pass


class InvalidTransaction(VaultError):
    """Raised when a submitted transaction or deposit is malformed"""
    pass


class Unauthorized(VaultError):
    """Raised when the caller is not a registered owner"""
    pass


class NotFound(VaultError):
    """Raised when a transaction index does not exist"""
    pass


class AlreadyExecuted(VaultError):
    """Raised when a transaction is already in its terminal state"""
    pass


class AlreadyConfirmedByCaller(VaultError):
    """Raised when an owner confirms the same transaction twice"""
    pass


class InsufficientConfirmations(VaultError):
    """Raised when execution is attempted before quorum"""
    pass


class ExecutionFailed(VaultError):
    """Raised when the external effect reports failure"""
    pass
