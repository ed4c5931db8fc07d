"""
In-memory vault implementing the standard with proportional share accounting.

Useful as a test double for integrators and to check the protocol's promises
(preview floors, authoritative Max* bounds, all-or-nothing commands). Token
transfers are simulated: ``funds`` is the amount attached to a call and
``paid_out`` records what the vault sent back.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Protocol

from vault_standard.errors import FundsMismatch, LimitExceeded, UnsupportedExtension, VaultStandardError, ZeroAmount
from vault_standard.extensions import CapabilityMsg, extension_execute_msg, extension_query_msg
from vault_standard.msg import (
    VAULT_STANDARD_INFO_KEY,
    ExecuteMsg,
    QueryMsg,
    VaultInfo,
    VaultStandardInfo,
    encode_response,
    execute_msg,
    query_msg,
    vault_standard_info,
)
from vault_standard.token import Token
from vault_standard.wire import Variant

logger = logging.getLogger(__name__)

BPS_DENOMINATOR: int = 10_000


class ExtensionHandler(Protocol):
    """Implements one capability on top of a ReferenceVault."""

    def execute(self, vault: "ReferenceVault", msg: Variant, sender: str, funds: int) -> Any:
        ...

    def query(self, vault: "ReferenceVault", msg: Variant) -> Any:
        ...


class ReferenceVault:
    def __init__(
        self,
        base_token: Token,
        vault_token: Token,
        deposit_fee_bps: int = 0,
        deposit_cap: Optional[int] = None,
        user_deposit_cap: Optional[int] = None,
        deposits_enabled: bool = True,
        extensions: Optional[Mapping[str, ExtensionHandler]] = None,
        version: Optional[int] = None,
    ) -> None:
        if not 0 <= deposit_fee_bps < BPS_DENOMINATOR:
            raise ValueError(f"deposit_fee_bps must be in [0, {BPS_DENOMINATOR}), got {deposit_fee_bps}")

        self.vault_info = VaultInfo(base_token=base_token, vault_token=vault_token)
        self.deposit_fee_bps = deposit_fee_bps
        self.deposit_cap = deposit_cap
        self.user_deposit_cap = user_deposit_cap
        self.deposits_enabled = deposits_enabled

        self.total_assets = 0
        self.total_supply = 0
        self.fees_collected = 0
        self.balances: Dict[str, int] = {}
        self.deposited: Dict[str, int] = {}
        self.paid_out: Dict[str, int] = {}

        self._handlers: Dict[str, ExtensionHandler] = dict(extensions or {})
        standard_info = vault_standard_info(version=version, extensions=self._handlers)
        self.execute_codec = execute_msg(extension_execute_msg(standard_info.extensions))
        self.query_codec = query_msg(extension_query_msg(standard_info.extensions))

        self.storage: Dict[bytes, bytes] = {
            VAULT_STANDARD_INFO_KEY: encode_response(QueryMsg.VaultStandardInfo(), standard_info),
        }

    # ---- accounting

    def deposit_fee(self, amount: int) -> int:
        # rounded up, in the vault's favour
        return -(-amount * self.deposit_fee_bps // BPS_DENOMINATOR)

    def shares_for(self, assets: int) -> int:
        if self.total_supply == 0 or self.total_assets == 0:
            return assets
        return assets * self.total_supply // self.total_assets

    def assets_for(self, shares: int) -> int:
        if self.total_supply == 0:
            return shares
        return shares * self.total_assets // self.total_supply

    def preview_deposit(self, amount: int) -> int:
        return self.shares_for(amount - self.deposit_fee(amount))

    def preview_redeem(self, amount: int) -> int:
        return self.assets_for(amount)

    def max_deposit(self, recipient: str) -> Optional[int]:
        if not self.deposits_enabled:
            return 0
        limits = []
        if self.deposit_cap is not None:
            limits.append(max(self.deposit_cap - self.total_assets, 0))
        if self.user_deposit_cap is not None:
            limits.append(max(self.user_deposit_cap - self.deposited.get(recipient, 0), 0))
        return min(limits) if limits else None

    def max_redeem(self, owner: str) -> Optional[int]:
        return self.balances.get(owner, 0)

    # ---- dispatch

    def execute(self, msg: Variant, sender: str, funds: int = 0) -> Any:
        """Apply a command. Every check runs before any state changes."""
        try:
            if isinstance(msg, ExecuteMsg.Deposit):
                return self._deposit(msg, sender, funds)
            if isinstance(msg, ExecuteMsg.Redeem):
                return self._redeem(msg, sender, funds)
            if isinstance(msg, ExecuteMsg.VaultExtension):
                return self._handler_for(msg.extension).execute(self, msg.extension.msg, sender, funds)
        except VaultStandardError as exc:
            logger.warning("Rejected %s from %s: %s", msg.tag(), sender, exc)
            raise
        raise TypeError(f"Not an ExecuteMsg: {msg!r}")

    def query(self, msg: Variant) -> Any:
        if isinstance(msg, QueryMsg.VaultStandardInfo):
            return VaultStandardInfo.model_validate_json(self.storage[VAULT_STANDARD_INFO_KEY])
        if isinstance(msg, QueryMsg.Info):
            return self.vault_info
        if isinstance(msg, QueryMsg.PreviewDeposit):
            return self.preview_deposit(msg.amount)
        if isinstance(msg, QueryMsg.PreviewRedeem):
            return self.preview_redeem(msg.amount)
        if isinstance(msg, QueryMsg.MaxDeposit):
            return self.max_deposit(msg.recipient)
        if isinstance(msg, QueryMsg.MaxRedeem):
            return self.max_redeem(msg.owner)
        if isinstance(msg, QueryMsg.TotalAssets):
            return self.total_assets
        if isinstance(msg, QueryMsg.TotalVaultTokenSupply):
            return self.total_supply
        if isinstance(msg, QueryMsg.ConvertToShares):
            return self.shares_for(msg.amount)
        if isinstance(msg, QueryMsg.ConvertToAssets):
            return self.assets_for(msg.amount)
        if isinstance(msg, QueryMsg.VaultExtension):
            return self._handler_for(msg.extension).query(self, msg.extension.msg)
        raise TypeError(f"Not a QueryMsg: {msg!r}")

    def execute_wire(self, data: Any, sender: str, funds: int = 0) -> Any:
        return self.execute(self.execute_codec.decode(data), sender, funds)

    def query_wire(self, data: Any) -> bytes:
        """Answer a wire query with the JSON bytes a contract would return."""
        msg = self.query_codec.decode(data)
        return encode_response(msg, self.query(msg))

    def raw_query(self, key: bytes) -> Optional[bytes]:
        return self.storage.get(key)

    # ---- commands

    def _handler_for(self, payload: CapabilityMsg) -> ExtensionHandler:
        handler = self._handlers.get(payload.capability)
        if handler is None:
            raise UnsupportedExtension(payload.capability)
        return handler

    def _deposit(self, msg: ExecuteMsg.Deposit, sender: str, funds: int) -> int:
        if msg.amount == 0:
            raise ZeroAmount("Deposit amount must be nonzero")
        if funds != msg.amount:
            raise FundsMismatch(f"Deposit amount {msg.amount} does not match attached funds {funds}")

        recipient = msg.recipient or sender
        limit = self.max_deposit(recipient)
        if limit is not None and msg.amount > limit:
            raise LimitExceeded(msg.amount, limit)

        fee = self.deposit_fee(msg.amount)
        shares = self.shares_for(msg.amount - fee)
        if shares == 0:
            raise ZeroAmount(f"Deposit of {msg.amount} would mint no vault tokens")

        self.total_assets += msg.amount - fee
        self.fees_collected += fee
        self.total_supply += shares
        self.balances[recipient] = self.balances.get(recipient, 0) + shares
        self.deposited[recipient] = self.deposited.get(recipient, 0) + msg.amount
        logger.debug("Deposit of %s by %s minted %s vault tokens to %s", msg.amount, sender, shares, recipient)
        return shares

    def _redeem(self, msg: ExecuteMsg.Redeem, sender: str, funds: int) -> int:
        if msg.amount == 0:
            raise ZeroAmount("Redeem amount must be nonzero")
        if funds != msg.amount:
            raise FundsMismatch(f"Redeem amount {msg.amount} does not match attached vault tokens {funds}")

        limit = self.max_redeem(sender)
        if limit is not None and msg.amount > limit:
            raise LimitExceeded(msg.amount, limit)

        recipient = msg.recipient or sender
        assets = self.assets_for(msg.amount)

        self.balances[sender] -= msg.amount
        self.total_supply -= msg.amount
        self.total_assets -= assets
        self.paid_out[recipient] = self.paid_out.get(recipient, 0) + assets
        logger.debug("Redeem of %s vault tokens by %s paid %s to %s", msg.amount, sender, assets, recipient)
        return assets
