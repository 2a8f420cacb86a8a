"""
Append-only transaction ledger

Pure storage: the ledger never checks authorization or quorum.
Those policies belong to MultiSigWallet, which is the only caller
of the mutating methods.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple

from .exceptions import NotFound


class TransactionStatus(Enum):
    PENDING = "pending"
    EXECUTED = "executed"


@dataclass(frozen=True)
class Transaction:
    """Read-only snapshot of a ledger record"""
    index: int
    target: str
    value: int
    payload: bytes
    status: TransactionStatus
    confirmations: Tuple[str, ...]

    @property
    def executed(self) -> bool:
        return self.status is TransactionStatus.EXECUTED

    @property
    def confirmation_count(self) -> int:
        return len(self.confirmations)

    def to_dict(self) -> dict:
        return {
            'index': self.index,
            'target': self.target,
            'value': self.value,
            'payload': self.payload.hex(),
            'status': self.status.value,
            'executed': self.executed,
            'confirmations': list(self.confirmations),
            'confirmation_count': self.confirmation_count
        }


@dataclass
class _Record:
    target: str
    value: int
    payload: bytes
    status: TransactionStatus = TransactionStatus.PENDING
    # dict keeps confirmation order; values unused
    confirmed_by: dict = field(default_factory=dict)


class TransactionLedger:
    """Ordered store of proposed transactions addressed by index"""

    def __init__(self):
        self._records: List[_Record] = []

    def append(self, target: str, value: int, payload: bytes = b"") -> int:
        self._records.append(_Record(target, value, bytes(payload)))
        return len(self._records) - 1

    def count(self) -> int:
        return len(self._records)

    def __len__(self):
        return self.count()

    def _record(self, index: int) -> _Record:
        if isinstance(index, bool) or not isinstance(index, int):
            raise NotFound("Transaction index must be an integer", {'index': index})
        if not 0 <= index < len(self._records):
            raise NotFound(f"Transaction {index} does not exist", {'count': len(self._records)})
        return self._records[index]

    def get(self, index: int) -> Transaction:
        record = self._record(index)
        return Transaction(
            index=index,
            target=record.target,
            value=record.value,
            payload=record.payload,
            status=record.status,
            confirmations=tuple(record.confirmed_by)
        )

    def is_executed(self, index: int) -> bool:
        return self._record(index).status is TransactionStatus.EXECUTED

    def confirmation_count(self, index: int) -> int:
        return len(self._record(index).confirmed_by)

    def is_confirmed(self, index: int, owner: str) -> bool:
        return owner in self._record(index).confirmed_by

    def confirmations(self, index: int) -> Tuple[str, ...]:
        """Owners that confirmed, in confirmation order"""
        return tuple(self._record(index).confirmed_by)

    def add_confirmation(self, index: int, owner: str) -> int:
        """Record owner's confirmation and return the new count"""
        record = self._record(index)
        record.confirmed_by[owner] = True
        return len(record.confirmed_by)

    def mark_executed(self, index: int) -> None:
        self._record(index).status = TransactionStatus.EXECUTED

    def indices(self, pending: bool = True, executed: bool = True) -> List[int]:
        """Indices filtered by status"""
        result = []
        for index, record in enumerate(self._records):
            if record.status is TransactionStatus.PENDING and pending:
                result.append(index)
            elif record.status is TransactionStatus.EXECUTED and executed:
                result.append(index)
        return result
