import math
from datetime import datetime, timedelta, timezone

from vault_standard.monitoring import VaultSnapshot, collect_snapshot, snapshots_to_frame
from vault_standard.msg import ExecuteMsg

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


class TestSnapshotFrame:
    def test_share_price_and_ordering(self):
        snapshots = [
            VaultSnapshot(timestamp=T0 + timedelta(hours=1), total_assets=1100, total_supply=1000),
            VaultSnapshot(timestamp=T0, total_assets=1000, total_supply=1000),
        ]

        df = snapshots_to_frame(snapshots)

        assert list(df.columns) == ["timestamp", "total_assets", "total_supply", "share_price"]
        assert list(df["timestamp"]) == [T0, T0 + timedelta(hours=1)]
        assert list(df["share_price"]) == [1.0, 1.1]

    def test_zero_supply_is_nan(self):
        df = snapshots_to_frame([VaultSnapshot(timestamp=T0, total_assets=0, total_supply=0)])
        assert math.isnan(df["share_price"].iloc[0])

    def test_uint128_totals(self):
        big = 2**100
        df = snapshots_to_frame([VaultSnapshot(timestamp=T0, total_assets=2 * big, total_supply=big)])
        assert df["share_price"].iloc[0] == 2.0

    def test_empty(self):
        df = snapshots_to_frame([])
        assert df.empty
        assert "share_price" in df.columns


class TestCollectSnapshot:
    def test_collects_totals(self, vault, make_client):
        vault.execute(ExecuteMsg.Deposit(amount=2500), sender="osmo1alice", funds=2500)
        client = make_client(vault)

        snapshot = collect_snapshot(client, now=T0)

        assert snapshot == VaultSnapshot(timestamp=T0, total_assets=2500, total_supply=2500)
