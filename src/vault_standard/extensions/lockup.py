"""
Lockup extension: vault tokens are escrowed by ``Unlock`` and can only be
withdrawn once their lockup period has passed.
"""
from __future__ import annotations

from typing import Any, ClassVar, List, Optional

from vault_standard.extensions.base import Capability
from vault_standard.wire import U32, U64, NewtypeVariant, TaggedUnion, Uint64, Uint128, Variant, WireModel


class Expiration(Variant):
    """Point at which a lockup is released."""


class AtHeight(Expiration, NewtypeVariant):
    height: U64


class AtTime(Expiration, NewtypeVariant):
    # nanoseconds since the unix epoch
    nanos: Uint64


class Never(Expiration):
    pass


EXPIRATION = TaggedUnion("Expiration", (AtHeight, AtTime, Never), base=Expiration)
ExpirationField = EXPIRATION.field_type()


class Duration(Variant):
    """Length of the lockup period, in blocks or seconds."""


class Height(Duration, NewtypeVariant):
    blocks: U64


class Time(Duration, NewtypeVariant):
    seconds: U64


DURATION = TaggedUnion("Duration", (Height, Time), base=Duration)
DurationField = DURATION.field_type()


class Lockup(WireModel):
    """A pending withdrawal created by ``Unlock``."""

    id: U64
    owner: str
    base_token_amount: Uint128
    release_at: ExpirationField


class LockupExecuteMsg:
    class Unlock(Variant):
        """Escrow ``amount`` vault tokens and start their lockup period."""

        amount: Uint128

    class WithdrawUnlocked(Variant):
        """Withdraw the assets of an expired lockup to ``recipient`` or the caller."""

        recipient: Optional[str] = None
        lockup_id: U64

    class EmergencyUnlock(Variant):
        """Redeem immediately, bypassing the lockup, when the vault allows it."""

        amount: Uint128


class LockupQueryMsg:
    class Lockups(Variant):
        returns: ClassVar[Any] = List[Lockup]

        owner: str
        start_after: Optional[U64] = None
        limit: Optional[U32] = None

    class Lockup(Variant):
        returns: ClassVar[Any] = Lockup

        lockup_id: U64

    class LockupDuration(Variant):
        returns: ClassVar[Any] = DurationField


CAPABILITY = Capability(
    name="lockup",
    execute=TaggedUnion(
        "LockupExecuteMsg",
        (LockupExecuteMsg.Unlock, LockupExecuteMsg.WithdrawUnlocked, LockupExecuteMsg.EmergencyUnlock),
    ),
    query=TaggedUnion(
        "LockupQueryMsg",
        (LockupQueryMsg.Lockups, LockupQueryMsg.Lockup, LockupQueryMsg.LockupDuration),
    ),
)
