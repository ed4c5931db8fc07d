from __future__ import annotations

import pandas as pd

from vault_standard.client import VaultQueryClient
from vault_standard.config import SETTINGS
from vault_standard.monitoring import collect_snapshot, snapshots_to_frame


def main() -> None:
    """Snapshot the configured vault's totals and append them to the parquet history."""
    if not SETTINGS.vault_address:
        raise RuntimeError("No vault address configured. Set Settings.vault_address first.")

    client = VaultQueryClient(
        base_url=SETTINGS.lcd_url_normalized,
        contract_address=SETTINGS.vault_address,
        timeout_seconds=SETTINGS.timeout_seconds,
    )

    standard_info = client.vault_standard_info()
    vault_info = client.info()
    print(f"Vault standard v{standard_info.version} extensions={list(standard_info.extensions)}")
    print(f"Base token: {vault_info.base_token.to_wire()}  vault token: {vault_info.vault_token.to_wire()}")

    snapshot_df = snapshots_to_frame([collect_snapshot(client)])

    # Totals can exceed int64; keep them as decimal strings on disk.
    snapshot_df[["total_assets", "total_supply"]] = snapshot_df[["total_assets", "total_supply"]].astype(str)

    output_path = SETTINGS.snapshot_path
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if output_path.exists():
        history_df = pd.read_parquet(output_path)
        snapshot_df = pd.concat([history_df, snapshot_df], ignore_index=True)

    snapshot_df.to_parquet(output_path, index=False)
    print(f"Wrote {output_path} ✅ rows={len(snapshot_df)} share_price={snapshot_df['share_price'].iloc[-1]}")


if __name__ == "__main__":
    main()
