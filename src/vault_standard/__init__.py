from vault_standard.errors import (
    InvalidTokenKind,
    LimitExceeded,
    MalformedAddress,
    MalformedMessage,
    UnsupportedExtension,
    VaultStandardError,
)
from vault_standard.msg import (
    VAULT_STANDARD_INFO_KEY,
    ExecuteMsg,
    QueryMsg,
    VaultInfo,
    VaultStandardInfo,
    execute_msg,
    query_msg,
    response_type,
)
from vault_standard.token import Native, Synthetic, Token

__all__ = [
    "VAULT_STANDARD_INFO_KEY",
    "ExecuteMsg",
    "InvalidTokenKind",
    "LimitExceeded",
    "MalformedAddress",
    "MalformedMessage",
    "Native",
    "QueryMsg",
    "Synthetic",
    "Token",
    "UnsupportedExtension",
    "VaultInfo",
    "VaultStandardError",
    "VaultStandardInfo",
    "execute_msg",
    "query_msg",
    "response_type",
]
