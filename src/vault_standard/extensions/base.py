from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Tuple

from vault_standard.errors import UnsupportedExtension
from vault_standard.wire import TaggedUnion, WireModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Capability:
    """An optional extension: its name plus its own command and query unions."""

    name: str
    execute: TaggedUnion
    query: TaggedUnion


class CapabilityMsg(WireModel):
    """One member of an extension payload union: ``{"<capability>": <inner msg>}``."""

    capability: str
    msg: Any

    @property
    def returns(self) -> Any:
        return getattr(self.msg, "returns", Any)

    def to_wire(self) -> Dict[str, Any]:
        return {self.capability: self.msg.to_wire()}


class ExtensionUnion(TaggedUnion):
    """Payload union with one member per enabled capability."""

    def __init__(self, name: str, members: Dict[str, TaggedUnion]) -> None:
        super().__init__(name, base=CapabilityMsg)
        for capability, inner in members.items():
            self.add(capability, _member_decoder(capability, inner))

    def unknown_tag(self, tag: str) -> Exception:
        return UnsupportedExtension(tag)


def _member_decoder(capability: str, inner: TaggedUnion):
    def decode(payload: Any) -> CapabilityMsg:
        return CapabilityMsg(capability=capability, msg=inner.decode(payload))

    return decode


_REGISTRY: Dict[str, Capability] = {}


def register(capability: Capability) -> Capability:
    """Make a capability available to the default extension unions."""
    if capability.name in _REGISTRY:
        raise ValueError(f"Capability {capability.name!r} is already registered")
    _REGISTRY[capability.name] = capability
    logger.debug("Registered vault extension %s", capability.name)
    return capability


def get_capability(name: str) -> Capability:
    try:
        return _REGISTRY[name]
    except KeyError:
        raise UnsupportedExtension(name) from None


def enabled_names(enabled: Iterable[str]) -> Tuple[str, ...]:
    """
    Normalize a set of capability names into registration order.

    The result is what a vault reports in ``VaultStandardInfo.extensions``,
    so identical configurations always produce identical lists.
    """
    wanted = set(enabled)
    for name in wanted:
        get_capability(name)
    return tuple(name for name in _REGISTRY if name in wanted)


def extension_execute_msg(enabled: Iterable[str]) -> ExtensionUnion:
    names = enabled_names(enabled)
    return ExtensionUnion("ExtensionExecuteMsg", {name: _REGISTRY[name].execute for name in names})


def extension_query_msg(enabled: Iterable[str]) -> ExtensionUnion:
    names = enabled_names(enabled)
    return ExtensionUnion("ExtensionQueryMsg", {name: _REGISTRY[name].query for name in names})
