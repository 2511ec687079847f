"""Owner set and approval threshold."""
from __future__ import annotations

import logging
from typing import Optional, Protocol, Sequence, Tuple, runtime_checkable

from .config import WalletSettings
from .exceptions import (
    DuplicateOwner,
    InvalidOwner,
    InvalidThreshold,
    ThresholdExceedsOwners,
)

logger = logging.getLogger(__name__)


@runtime_checkable
class OwnerAuthority(Protocol):
    """Capability check used by the approval engine."""

    @property
    def required(self) -> int:
        ...

    def is_owner(self, identity: str) -> bool:
        ...


class OwnerRegistry:
    """
    Fixed set of wallet owners and the number of approvals a transaction needs.

    The registry is immutable once built. Owner order is kept as given so
    queries such as the approver list come back in a stable order.
    """

    __slots__ = ("_owners", "_members", "_required")

    def __init__(
        self,
        owners: Sequence[str],
        required: int,
        settings: Optional[WalletSettings] = None,
    ) -> None:
        settings = settings or WalletSettings()

        if required < 1:
            raise InvalidThreshold(required)
        if required > len(owners):
            raise ThresholdExceedsOwners(required, len(owners))

        ordered: list[str] = []
        members: set[str] = set()
        for owner in owners:
            if settings.is_null_identity(owner) or not isinstance(owner, str):
                raise InvalidOwner(owner)
            if owner in members:
                if not settings.allow_duplicate_owners:
                    raise DuplicateOwner(owner)
                continue
            members.add(owner)
            ordered.append(owner)

        # Duplicates collapse to one vote, so the quorum must be reachable
        # with distinct owners only.
        if required > len(ordered):
            raise ThresholdExceedsOwners(required, len(ordered))

        self._owners: Tuple[str, ...] = tuple(ordered)
        self._members = frozenset(members)
        self._required = required

        logger.debug(f"Owner registry built: {len(self._owners)} owners, {required} required")

    @property
    def owners(self) -> Tuple[str, ...]:
        return self._owners

    @property
    def required(self) -> int:
        return self._required

    def is_owner(self, identity: str) -> bool:
        return identity in self._members

    def __len__(self) -> int:
        return len(self._owners)

    def __contains__(self, identity: object) -> bool:
        return identity in self._members

    def __repr__(self) -> str:
        return f"OwnerRegistry(owners={len(self._owners)}, required={self._required})"


__all__ = ["OwnerAuthority", "OwnerRegistry"]
