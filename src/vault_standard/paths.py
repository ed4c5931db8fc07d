from __future__ import annotations

# CosmWasm LCD routes. ``query`` and ``key`` are url-safe-quoted base64.
SMART_QUERY_PATH: str = "/cosmwasm/wasm/v1/contract/{address}/smart/{query}"

RAW_QUERY_PATH: str = "/cosmwasm/wasm/v1/contract/{address}/raw/{key}"
