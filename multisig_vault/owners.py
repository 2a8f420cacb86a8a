from typing import Iterable, Tuple

from .exceptions import InvalidConfiguration
from .identity import is_null_identity


class OwnerRegistry:
    """Immutable set of vault owners and the quorum threshold"""

    __slots__ = ("_owners", "_members", "_threshold")

    def __init__(self, owners: Iterable[str], threshold: int):
        owners = tuple(owners)

        if not owners:
            raise InvalidConfiguration("Owner list must not be empty")

        if isinstance(threshold, bool) or not isinstance(threshold, int):
            raise InvalidConfiguration(
                "Threshold must be an integer", {"threshold": threshold}
            )

        if threshold < 1:
            raise InvalidConfiguration(
                f"Threshold must be at least 1, got {threshold}"
            )

        if threshold > len(owners):
            raise InvalidConfiguration(
                f"Threshold {threshold} exceeds owner count {len(owners)}"
            )

        seen = set()
        for position, owner in enumerate(owners):
            if is_null_identity(owner):
                raise InvalidConfiguration(
                    "Owner must not be the null identity", {"position": position}
                )
            if not isinstance(owner, str):
                raise InvalidConfiguration(
                    "Owner must be a string identity", {"position": position}
                )
            if owner in seen:
                raise InvalidConfiguration(
                    f"Duplicate owner {owner[:8]}...", {"position": position}
                )
            seen.add(owner)

        self._owners = owners
        self._members = frozenset(seen)
        self._threshold = threshold

    @property
    def owners(self) -> Tuple[str, ...]:
        """Owners in construction order"""
        return self._owners

    @property
    def threshold(self) -> int:
        return self._threshold

    def is_owner(self, identity: str) -> bool:
        """Check if identity is a vault owner"""
        try:
            return identity in self._members
        except TypeError:
            # unhashable identities are never owners
            return False

    def owner_count(self) -> int:
        return len(self._owners)

    def __contains__(self, identity) -> bool:
        return self.is_owner(identity)

    def __repr__(self):
        return f"OwnerRegistry({self.threshold}-of-{self.owner_count()})"
