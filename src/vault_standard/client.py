from __future__ import annotations

import base64
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx
from tenacity import before_sleep_log, retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from vault_standard.errors import MalformedMessage, QueryError
from vault_standard.extensions import CapabilityMsg
from vault_standard.msg import (
    VAULT_STANDARD_INFO_KEY,
    QueryMsg,
    VaultInfo,
    VaultStandardInfo,
    decode_response,
)
from vault_standard.paths import RAW_QUERY_PATH, SMART_QUERY_PATH
from vault_standard.wire import Variant, to_json

logger = logging.getLogger(__name__)


def _b64_path_segment(raw: bytes) -> str:
    return quote(base64.b64encode(raw).decode(), safe="")


class VaultQueryClient:
    """Smart and raw queries against a vault contract through an LCD REST gateway."""

    def __init__(
        self,
        base_url: str,
        contract_address: str,
        timeout_seconds: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._contract_address = contract_address
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    @property
    def contract_address(self) -> str:
        return self._contract_address

    @retry(
        wait=wait_exponential(min=1, max=10),
        stop=stop_after_attempt(5),
        retry=retry_if_exception_type(httpx.TransportError),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    def _get(self, path: str) -> Dict[str, Any]:
        """GET an LCD route and return the JSON payload as a dict."""
        with httpx.Client(base_url=self._base_url, timeout=self._timeout_seconds, transport=self._transport) as client:
            response = client.get(path)
            response.raise_for_status()
            data = response.json()

        if not isinstance(data, dict) or "data" not in data:
            raise QueryError(f"Unexpected LCD response: {data}")
        return data

    def smart_query(self, msg: Variant) -> Any:
        """Send a QueryMsg and decode the response into the variant's declared type."""
        path = SMART_QUERY_PATH.format(address=self._contract_address, query=_b64_path_segment(to_json(msg)))
        logger.debug("Smart query %s on %s", msg.tag(), self._contract_address)
        data = self._get(path)["data"]
        try:
            return decode_response(msg, data)
        except MalformedMessage as exc:
            raise QueryError(str(exc)) from exc

    def raw_query(self, key: bytes) -> Optional[bytes]:
        """Read a storage key directly. Returns None when the key is unset."""
        path = RAW_QUERY_PATH.format(address=self._contract_address, key=_b64_path_segment(key))
        data = self._get(path)["data"]
        if not data:
            return None
        try:
            return base64.b64decode(data, validate=True)
        except ValueError as exc:
            raise QueryError(f"Raw query returned invalid base64 for key {key!r}") from exc

    def vault_standard_info(self, raw: bool = True) -> VaultStandardInfo:
        """
        Read VaultStandardInfo, from storage by default.

        Falls back to the smart query when the vault does not store the info
        under the well-known key.
        """
        if raw:
            stored = self.raw_query(VAULT_STANDARD_INFO_KEY)
            if stored is not None:
                try:
                    return VaultStandardInfo.model_validate_json(stored)
                except ValueError as exc:
                    raise QueryError(f"Stored vault standard info is malformed: {exc}") from exc
            logger.info("No raw vault_standard_info on %s, using smart query", self._contract_address)
        return self.smart_query(QueryMsg.VaultStandardInfo())

    def info(self) -> VaultInfo:
        return self.smart_query(QueryMsg.Info())

    def preview_deposit(self, amount: int) -> int:
        return self.smart_query(QueryMsg.PreviewDeposit(amount=amount))

    def preview_redeem(self, amount: int) -> int:
        return self.smart_query(QueryMsg.PreviewRedeem(amount=amount))

    def max_deposit(self, recipient: str) -> Optional[int]:
        return self.smart_query(QueryMsg.MaxDeposit(recipient=recipient))

    def max_redeem(self, owner: str) -> Optional[int]:
        return self.smart_query(QueryMsg.MaxRedeem(owner=owner))

    def total_assets(self) -> int:
        return self.smart_query(QueryMsg.TotalAssets())

    def total_vault_token_supply(self) -> int:
        return self.smart_query(QueryMsg.TotalVaultTokenSupply())

    def convert_to_shares(self, amount: int) -> int:
        return self.smart_query(QueryMsg.ConvertToShares(amount=amount))

    def convert_to_assets(self, amount: int) -> int:
        return self.smart_query(QueryMsg.ConvertToAssets(amount=amount))

    def extension_query(self, capability: str, msg: Variant) -> Any:
        """Query an extension; the response is typed by the extension's own variant."""
        return self.smart_query(QueryMsg.VaultExtension(extension=CapabilityMsg(capability=capability, msg=msg)))
