from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Optional

import pandas as pd
from pydantic import BaseModel

from vault_standard.client import VaultQueryClient

SNAPSHOT_COLUMNS = ["timestamp", "total_assets", "total_supply"]


class VaultSnapshot(BaseModel):
    """Vault totals at one point in time."""

    timestamp: datetime
    total_assets: int
    total_supply: int


def collect_snapshot(client: VaultQueryClient, now: Optional[datetime] = None) -> VaultSnapshot:
    """Query the totals of a vault and stamp them with the current UTC time."""
    total_assets = client.total_assets()
    total_supply = client.total_vault_token_supply()
    return VaultSnapshot(
        timestamp=now or datetime.now(timezone.utc),
        total_assets=total_assets,
        total_supply=total_supply,
    )


def snapshots_to_frame(snapshots: Iterable[VaultSnapshot]) -> pd.DataFrame:
    """
    Build a timestamp-sorted frame of snapshots with a derived share price.

    share_price is total_assets / total_supply, NaN while the supply is zero.
    """
    rows = [snapshot.model_dump() for snapshot in snapshots]
    df = pd.DataFrame(rows, columns=SNAPSHOT_COLUMNS).sort_values("timestamp").reset_index(drop=True)

    # Uint128 totals overflow int64, so the ratio is computed in floats.
    assets = df["total_assets"].astype(float)
    supply = df["total_supply"].astype(float)
    df["share_price"] = assets / supply.where(supply > 0)
    return df
