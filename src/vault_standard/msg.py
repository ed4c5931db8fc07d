"""
Message families of the vault standard.

``ExecuteMsg`` and ``QueryMsg`` are namespaces of variants; the codecs that
decode them off the wire are built by ``execute_msg`` and ``query_msg``, which
take the extension payload codec as a parameter so vaults can plug in
capabilities the default union does not know about.
"""
from __future__ import annotations

from typing import Any, ClassVar, Iterable, Optional, Tuple, Type

from pydantic import ValidationError

from vault_standard.config import SETTINGS
from vault_standard.errors import MalformedMessage
from vault_standard.extensions import enabled_names, extension_execute_msg, extension_query_msg
from vault_standard.token import TokenField
from vault_standard.wire import (
    ExtensionCodec,
    NewtypeVariant,
    TaggedUnion,
    Uint16,
    Uint128,
    Variant,
    WireModel,
    dump_value,
    load_value,
)

# Storage key under which vaults keep their VaultStandardInfo, for raw reads.
VAULT_STANDARD_INFO_KEY: bytes = b"vault_standard_info"


class VaultStandardInfo(WireModel):
    """
    Version of the vault standard a vault implements and the extensions it enables.

    Vaults store this under ``VAULT_STANDARD_INFO_KEY`` so other contracts can
    read it with a raw query instead of a smart query.
    """

    version: Uint16
    extensions: Tuple[str, ...] = ()


class VaultInfo(WireModel):
    """Tokens a vault accepts for deposits and issues as receipts."""

    base_token: TokenField
    vault_token: TokenField


class Empty(WireModel):
    pass


class VaultExtension(NewtypeVariant):
    """Opaque extension payload; the base protocol does not interpret it."""

    extension: Any

    def wire_payload(self) -> Any:
        return self.extension.to_wire()


class ExecuteMsg:
    class Deposit(Variant):
        """
        Deposit ``amount`` of the base token, attached to the call, and mint
        vault tokens to ``recipient`` or the caller. ``amount`` must be nonzero
        and equal to the attached funds.
        """

        amount: Uint128
        recipient: Optional[str] = None

    class Redeem(Variant):
        """
        Burn ``amount`` vault tokens and send the underlying assets to
        ``recipient`` or the caller. The vault tokens are attached to the call,
        or were already escrowed by the lockup extension's ``Unlock``.
        """

        recipient: Optional[str] = None
        amount: Uint128

    class VaultExtension(VaultExtension):
        pass


class QueryMsg:
    class VaultStandardInfo(Variant):
        returns: ClassVar[Any] = VaultStandardInfo

    class Info(Variant):
        returns: ClassVar[Any] = VaultInfo

    class PreviewDeposit(Variant):
        """
        Vault tokens minted for depositing ``amount`` now.

        Never more than an immediate ``Deposit`` would mint, inclusive of
        deposit fees, and ignoring deposit limits.
        """

        returns: ClassVar[Any] = Uint128

        amount: Uint128

    class PreviewRedeem(Variant):
        """Base tokens returned for redeeming ``amount`` vault tokens now, ignoring limits."""

        returns: ClassVar[Any] = Uint128

        amount: Uint128

    class MaxDeposit(Variant):
        """
        Upper bound on what ``recipient`` can deposit, from global and per-user
        limits but never from the recipient's balance. Zero while deposits are
        disabled; ``None`` when no limit is configured.
        """

        returns: ClassVar[Any] = Optional[Uint128]

        recipient: str

    class MaxRedeem(Variant):
        """Upper bound, in vault tokens, on what ``owner`` can redeem."""

        returns: ClassVar[Any] = Optional[Uint128]

        owner: str

    class TotalAssets(Variant):
        """Approximate assets under management in base tokens. Display only."""

        returns: ClassVar[Any] = Uint128

    class TotalVaultTokenSupply(Variant):
        returns: ClassVar[Any] = Uint128

    class ConvertToShares(Variant):
        """Average-user share price conversion under ideal conditions. Display only."""

        returns: ClassVar[Any] = Uint128

        amount: Uint128

    class ConvertToAssets(Variant):
        """Inverse of ``ConvertToShares``. Display only."""

        returns: ClassVar[Any] = Uint128

        amount: Uint128

    class VaultExtension(VaultExtension):
        # The base protocol cannot name the response of an extension query,
        # see response_type() for the special case.
        returns: ClassVar[Any] = Empty


EXECUTE_VARIANTS = (ExecuteMsg.Deposit, ExecuteMsg.Redeem)

QUERY_VARIANTS = (
    QueryMsg.VaultStandardInfo,
    QueryMsg.Info,
    QueryMsg.PreviewDeposit,
    QueryMsg.PreviewRedeem,
    QueryMsg.MaxDeposit,
    QueryMsg.MaxRedeem,
    QueryMsg.TotalAssets,
    QueryMsg.TotalVaultTokenSupply,
    QueryMsg.ConvertToShares,
    QueryMsg.ConvertToAssets,
)


def _family(
    name: str, variants: Iterable[type], wrapper: Type[VaultExtension], extension: ExtensionCodec
) -> TaggedUnion:
    family = TaggedUnion(name, variants, base=Variant)
    family.add(wrapper.tag(), lambda payload: wrapper(extension=extension.decode(payload)))
    return family


def execute_msg(extension: Optional[ExtensionCodec] = None) -> TaggedUnion:
    """Codec for ExecuteMsg; defaults to the configured extension set."""
    if extension is None:
        extension = extension_execute_msg(SETTINGS.extensions)
    return _family("ExecuteMsg", EXECUTE_VARIANTS, ExecuteMsg.VaultExtension, extension)


def query_msg(extension: Optional[ExtensionCodec] = None) -> TaggedUnion:
    """Codec for QueryMsg; defaults to the configured extension set."""
    if extension is None:
        extension = extension_query_msg(SETTINGS.extensions)
    return _family("QueryMsg", QUERY_VARIANTS, QueryMsg.VaultExtension, extension)


def vault_standard_info(version: Optional[int] = None, extensions: Optional[Iterable[str]] = None) -> VaultStandardInfo:
    """VaultStandardInfo for a version and capability set, defaulting to SETTINGS."""
    return VaultStandardInfo(
        version=SETTINGS.standard_version if version is None else version,
        extensions=enabled_names(SETTINGS.extensions if extensions is None else extensions),
    )


def response_type(msg: Variant) -> Any:
    """
    Response type of a query.

    Extension queries are resolved through their payload: the declared
    ``Empty`` of ``VaultExtension`` is only a placeholder, so the capability's
    own query variant decides. Payloads that declare nothing yield ``Any``.
    """
    if isinstance(msg, QueryMsg.VaultExtension):
        return getattr(msg.extension, "returns", Any)
    returns = getattr(msg, "returns", None)
    if returns is None:
        raise TypeError(f"{type(msg).__name__} is not a query")
    return returns


def encode_response(msg: Variant, value: Any) -> bytes:
    """JSON bytes of a query response, as a vault returns them."""
    return dump_value(response_type(msg), value)


def decode_response(msg: Variant, data: Any) -> Any:
    try:
        return load_value(response_type(msg), data)
    except ValidationError as exc:
        raise MalformedMessage(f"Invalid response to {msg.tag()!r}: {exc}") from exc
