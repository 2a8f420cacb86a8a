"""
Multi-signature vault: submit -> confirm -> execute
"""

import logging
import threading
from typing import Iterable, List, Optional, Tuple

from .config import WalletConfig
from .effects import EffectDispatcher
from .events import (
    EventLog, Deposit, TransactionSubmitted, TransactionConfirmed,
    TransactionExecuted, ExecutionFailure
)
from .exceptions import (
    Unauthorized, AlreadyExecuted, AlreadyConfirmedByCaller,
    InsufficientConfirmations, ExecutionFailed, InvalidTransaction
)
from .identity import is_null_identity
from .ledger import TransactionLedger, Transaction

logger = logging.getLogger(__name__)


def _check_amount(amount, name: str) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidTransaction(f"{name} must be an integer", {name: amount})
    if amount < 0:
        raise InvalidTransaction(f"{name} must not be negative", {name: amount})


class MultiSigWallet:
    """
    Shared fund controlled by a fixed set of owners.

    Invariants:
    - Only owners submit, confirm and execute
    - An owner contributes at most one confirmation per transaction
    - A transaction executes at most once, and only with quorum
    - The executed flag is committed before the external effect runs,
      and stays set when the effect fails

    All state changes happen under a single lock. The external effect is
    invoked after the lock is released, so a target calling back into the
    wallet sees the transaction already executed.
    """

    def __init__(
        self,
        owners: Iterable[str],
        threshold: int,
        dispatcher: Optional[EffectDispatcher] = None,
        event_log: Optional[EventLog] = None,
        address: Optional[str] = None,
    ):
        self.config = WalletConfig(owners=list(owners), threshold=threshold)
        self.registry = self.config.build_registry()
        self.address = address or "0x" + self.config.wallet_id()[:40]

        self.dispatcher = dispatcher or EffectDispatcher()
        self.events = event_log or EventLog()

        self._ledger = TransactionLedger()
        self._balance = 0
        self._lock = threading.Lock()

        logger.info(
            f"Wallet {self.address} created: "
            f"{self.threshold}-of-{self.registry.owner_count()} owners"
        )

    @classmethod
    def from_config(cls, config: WalletConfig, **kwargs) -> 'MultiSigWallet':
        return cls(config.owners, config.threshold, **kwargs)

    @property
    def owners(self) -> Tuple[str, ...]:
        return self.registry.owners

    @property
    def threshold(self) -> int:
        return self.registry.threshold

    @property
    def balance(self) -> int:
        with self._lock:
            return self._balance

    def is_owner(self, identity: str) -> bool:
        return self.registry.is_owner(identity)

    def _require_owner(self, caller: str, action: str) -> None:
        if not self.registry.is_owner(caller):
            logger.warning(f"Rejected {action} from non-owner {str(caller)[:8]}...")
            raise Unauthorized("Caller is not an owner", {'action': action})

    def deposit(self, sender: str, amount: int) -> int:
        """Accept incoming value from anyone. Returns the new balance."""
        _check_amount(amount, 'amount')

        event = Deposit(sender=sender, amount=amount)
        with self._lock:
            self._balance += amount
            balance = self._balance
            self.events.append(event)

        self.events.notify(event)
        logger.info(f"Deposit of {amount} from {str(sender)[:8]}..., balance {balance}")
        return balance

    def submit_transaction(self, caller: str, target: str, value: int, payload: bytes = b"") -> int:
        """Propose a transfer/call. Returns the new transaction index."""
        self._require_owner(caller, 'submit')

        if is_null_identity(target):
            raise InvalidTransaction("Target must not be the null identity")
        if not isinstance(target, str):
            raise InvalidTransaction("Target must be a string identity", {'target': repr(target)})
        _check_amount(value, 'value')
        if payload is None:
            payload = b""
        if not isinstance(payload, (bytes, bytearray)):
            raise InvalidTransaction("Payload must be bytes")
        payload = bytes(payload)

        with self._lock:
            index = self._ledger.append(target, value, payload)
            event = TransactionSubmitted(index=index, target=target, value=value, payload=payload)
            self.events.append(event)

        self.events.notify(event)
        logger.info(f"Transaction {index} submitted by {caller[:8]}...: {value} to {target[:8]}...")
        return index

    def confirm_transaction(self, caller: str, index: int) -> int:
        """Record caller's confirmation. Returns the new confirmation count."""
        self._require_owner(caller, 'confirm')

        with self._lock:
            if self._ledger.is_executed(index):
                logger.warning(f"Confirm on executed transaction {index}")
                raise AlreadyExecuted(f"Transaction {index} already executed")

            if self._ledger.is_confirmed(index, caller):
                logger.warning(f"Repeat confirmation of {index} by {caller[:8]}...")
                raise AlreadyConfirmedByCaller(
                    f"Transaction {index} already confirmed by caller"
                )

            count = self._ledger.add_confirmation(index, caller)
            event = TransactionConfirmed(index=index, owner=caller)
            self.events.append(event)

        self.events.notify(event)
        logger.info(f"Transaction {index} confirmed by {caller[:8]}... ({count}/{self.threshold})")
        return count

    def execute_transaction(self, caller: str, index: int) -> Transaction:
        """Execute a transaction that has reached quorum.

        The attempt is consumed even if the external effect fails.
        """
        self._require_owner(caller, 'execute')

        with self._lock:
            if self._ledger.is_executed(index):
                logger.warning(f"Execute on executed transaction {index}")
                raise AlreadyExecuted(f"Transaction {index} already executed")

            count = self._ledger.confirmation_count(index)
            if count < self.threshold:
                logger.warning(f"Execute on {index} without quorum ({count}/{self.threshold})")
                raise InsufficientConfirmations(
                    f"Transaction {index} has {count} of {self.threshold} confirmations",
                    {'confirmations': count, 'threshold': self.threshold}
                )

            self._ledger.mark_executed(index)
            tx = self._ledger.get(index)

            funded = tx.value <= self._balance
            if funded:
                self._balance -= tx.value

        if not funded:
            self._fail_execution(caller, tx, "Insufficient vault balance")

        try:
            ok = self.dispatcher.dispatch(self.address, tx.target, tx.value, tx.payload)
        except Exception as e:
            logger.warning(f"Dispatch of transaction {index} raised {type(e).__name__}: {e}")
            ok = False

        if not ok:
            with self._lock:
                self._balance += tx.value
            self._fail_execution(caller, tx, "External call failed")

        event = TransactionExecuted(index=index, executor=caller)
        with self._lock:
            self.events.append(event)

        self.events.notify(event)
        logger.info(f"Transaction {index} executed by {caller[:8]}...")
        return tx

    def _fail_execution(self, caller: str, tx: Transaction, reason: str) -> None:
        event = ExecutionFailure(index=tx.index, executor=caller)
        with self._lock:
            self.events.append(event)

        self.events.notify(event)
        logger.warning(f"Transaction {tx.index} failed: {reason}")
        raise ExecutionFailed(
            f"Transaction {tx.index} failed: {reason}",
            {'target': tx.target, 'value': tx.value}
        )

    # Read accessors, open to any caller

    def transaction_count(self) -> int:
        with self._lock:
            return self._ledger.count()

    def transaction_at(self, index: int) -> Transaction:
        with self._lock:
            return self._ledger.get(index)

    def get_confirmations(self, index: int) -> Tuple[str, ...]:
        with self._lock:
            return self._ledger.confirmations(index)

    def get_confirmation_count(self, index: int) -> int:
        with self._lock:
            return self._ledger.confirmation_count(index)

    def is_confirmed(self, index: int, owner: str) -> bool:
        with self._lock:
            return self._ledger.is_confirmed(index, owner)

    def is_executable(self, index: int) -> bool:
        """Pending and at quorum"""
        with self._lock:
            return (not self._ledger.is_executed(index)
                    and self._ledger.confirmation_count(index) >= self.threshold)

    def get_transaction_ids(self, pending: bool = True, executed: bool = True) -> List[int]:
        with self._lock:
            return self._ledger.indices(pending=pending, executed=executed)

    def get_transactions(self, pending: bool = True, executed: bool = True) -> List[Transaction]:
        with self._lock:
            return [self._ledger.get(i) for i in self._ledger.indices(pending, executed)]
