import base64
import json
from urllib.parse import unquote

import httpx
import pytest

from vault_standard.client import VaultQueryClient
from vault_standard.errors import MalformedAddress
from vault_standard.extensions.keeper import KeeperExecuteMsg, KeeperQueryMsg
from vault_standard.reference import ReferenceVault
from vault_standard.token import Native, Synthetic


class PrefixAddressValidator:
    """Accepts lowercase addresses with a fixed human-readable prefix."""

    def __init__(self, prefix: str = "osmo1") -> None:
        self.prefix = prefix

    def addr_validate(self, address: str) -> str:
        if not address.startswith(self.prefix) or address != address.lower():
            raise MalformedAddress(f"Invalid address: {address}")
        return address


@pytest.fixture
def validator():
    return PrefixAddressValidator()


@pytest.fixture
def base_token():
    return Native(denom="uosmo")


@pytest.fixture
def vault_token():
    return Synthetic(address="osmo1vaulttoken")


@pytest.fixture
def vault(base_token, vault_token):
    return ReferenceVault(base_token=base_token, vault_token=vault_token)


class KeeperHandler:
    """Minimal keeper capability: a list of keepers managed by anyone."""

    def __init__(self):
        self.keepers = []
        self.harvests = 0

    def execute(self, vault, msg, sender, funds):
        if isinstance(msg, KeeperExecuteMsg.AddKeeper):
            self.keepers.append(msg.address)
        elif isinstance(msg, KeeperExecuteMsg.RemoveKeeper):
            self.keepers.remove(msg.address)
        elif isinstance(msg, KeeperExecuteMsg.Harvest):
            self.harvests += 1

    def query(self, vault, msg):
        if isinstance(msg, KeeperQueryMsg.Keepers):
            return list(self.keepers)
        return msg.address in self.keepers


@pytest.fixture
def keeper_handler():
    return KeeperHandler()


CONTRACT = "osmo1vault"
LCD_URL = "https://lcd.example.org"


def lcd_transport(vault, requests=None):
    """Serve LCD smart/raw query routes from a ReferenceVault."""

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        path = unquote(request.url.path)
        prefix = f"/cosmwasm/wasm/v1/contract/{CONTRACT}/"
        assert path.startswith(prefix)
        route, _, encoded = path[len(prefix):].partition("/")
        decoded = base64.b64decode(encoded)

        if route == "smart":
            answer = vault.query_wire(json.loads(decoded))
            return httpx.Response(200, json={"data": json.loads(answer)})
        if route == "raw":
            stored = vault.raw_query(decoded)
            return httpx.Response(200, json={"data": base64.b64encode(stored).decode() if stored else ""})
        return httpx.Response(404, json={"code": 5, "message": "not found"})

    return httpx.MockTransport(handler)


@pytest.fixture
def make_client():
    """Build a VaultQueryClient whose LCD gateway is backed by a ReferenceVault."""

    def make(vault, requests=None):
        return VaultQueryClient(LCD_URL, CONTRACT, transport=lcd_transport(vault, requests))

    return make
