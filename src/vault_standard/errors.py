from __future__ import annotations


class VaultStandardError(Exception):
    """Base class for every error raised by the vault standard package."""


class InvalidTokenKind(VaultStandardError, ValueError):
    """A token conversion was attempted against the wrong variant."""


class MalformedAddress(VaultStandardError, ValueError):
    """The address validator rejected a synthetic token address."""


class MalformedMessage(VaultStandardError, ValueError):
    """A wire payload could not be decoded into a message."""


class UnsupportedExtension(VaultStandardError):
    """An extension payload referenced a capability the vault does not include."""

    def __init__(self, capability: str) -> None:
        super().__init__(f"Unsupported vault extension: {capability!r}")
        self.capability = capability


class LimitExceeded(VaultStandardError):
    """A command amount exceeded the bound reported by the matching Max* query."""

    def __init__(self, amount: int, limit: int) -> None:
        super().__init__(f"Amount {amount} exceeds limit {limit}")
        self.amount = amount
        self.limit = limit


class ZeroAmount(VaultStandardError, ValueError):
    """A command was sent with a zero amount."""


class FundsMismatch(VaultStandardError, ValueError):
    """The amount in a command does not match the funds attached to the call."""


class QueryError(VaultStandardError, RuntimeError):
    """A query gateway returned a response that could not be interpreted."""
