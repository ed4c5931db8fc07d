from vault_standard.extensions import keeper, lockup
from vault_standard.extensions.base import (
    Capability,
    CapabilityMsg,
    ExtensionUnion,
    enabled_names,
    extension_execute_msg,
    extension_query_msg,
    get_capability,
    register,
)

register(lockup.CAPABILITY)
register(keeper.CAPABILITY)

__all__ = [
    "Capability",
    "CapabilityMsg",
    "ExtensionUnion",
    "enabled_names",
    "extension_execute_msg",
    "extension_query_msg",
    "get_capability",
    "register",
]
