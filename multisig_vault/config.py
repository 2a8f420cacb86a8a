import hashlib
from dataclasses import dataclass, field
from typing import List

from .exceptions import InvalidConfiguration
from .owners import OwnerRegistry


@dataclass
class WalletConfig:
    """Owner roster and quorum threshold for a vault"""

    owners: List[str] = field(default_factory=list)
    threshold: int = 1

    def __post_init__(self):
        self.owners = list(self.owners)
        # Fails with InvalidConfiguration on any violation
        OwnerRegistry(self.owners, self.threshold)

    @classmethod
    def unanimous(cls, owners: List[str]) -> 'WalletConfig':
        """Every owner must confirm"""
        return cls(owners=owners, threshold=len(owners))

    @classmethod
    def majority(cls, owners: List[str]) -> 'WalletConfig':
        """More than half of the owners must confirm"""
        return cls(owners=owners, threshold=len(owners) // 2 + 1)

    def build_registry(self) -> OwnerRegistry:
        return OwnerRegistry(self.owners, self.threshold)

    def wallet_id(self) -> str:
        """Deterministic wallet ID from owners and threshold"""
        hasher = hashlib.sha256()
        hasher.update(b"MULTISIG_VAULT_V1")

        for owner in self.owners:
            hasher.update(owner.encode())
        hasher.update(self.threshold.to_bytes(4, 'little'))

        return hasher.hexdigest()

    def to_dict(self) -> dict:
        return {'owners': list(self.owners), 'threshold': self.threshold}

    @classmethod
    def from_dict(cls, data: dict) -> 'WalletConfig':
        if not isinstance(data, dict):
            raise InvalidConfiguration("Configuration must be a mapping")

        owners = data.get('owners')
        if not isinstance(owners, list):
            raise InvalidConfiguration("'owners' must be a list")

        threshold = data.get('threshold')
        if threshold is None:
            threshold = len(owners) // 2 + 1

        return cls(owners=owners, threshold=threshold)
