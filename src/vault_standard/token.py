from __future__ import annotations

from abc import abstractmethod
from typing import Protocol

from vault_standard.errors import InvalidTokenKind, MalformedAddress
from vault_standard.wire import NewtypeVariant, TaggedUnion


class AddressValidator(Protocol):
    """Host capability that checks an address string and returns its canonical form."""

    def addr_validate(self, address: str) -> str:
        ...


class Token(NewtypeVariant):
    """
    An asset held or issued by a vault.

    The two narrowing conversions fail loudly on the wrong variant; callers
    that need to branch should use ``is_native`` / ``is_synthetic``.
    """

    @property
    def is_native(self) -> bool:
        return isinstance(self, Native)

    @property
    def is_synthetic(self) -> bool:
        return isinstance(self, Synthetic)

    @abstractmethod
    def to_synthetic_address(self, validator: AddressValidator) -> str:
        ...

    @abstractmethod
    def to_native_denom(self) -> str:
        ...


class Native(Token):
    """Host-native asset identified by its denom."""

    denom: str

    def to_synthetic_address(self, validator: AddressValidator) -> str:
        raise InvalidTokenKind(f"Native token {self.denom} cannot be converted to address")

    def to_native_denom(self) -> str:
        return self.denom


class Synthetic(Token):
    """Asset represented by a separate token contract, identified by its address."""

    address: str

    def to_synthetic_address(self, validator: AddressValidator) -> str:
        try:
            return validator.addr_validate(self.address)
        except MalformedAddress:
            raise
        except ValueError as exc:
            raise MalformedAddress(f"Invalid synthetic token address {self.address!r}: {exc}") from exc

    def to_native_denom(self) -> str:
        raise InvalidTokenKind(f"Synthetic token {self.address} cannot be converted to native denom")


# "cw20" is the tag older vaults use for contract-issued tokens.
TOKEN = TaggedUnion("Token", (Native, Synthetic), aliases={"cw20": "synthetic"}, base=Token)

TokenField = TOKEN.field_type()
