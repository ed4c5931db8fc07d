from __future__ import annotations

from pathlib import Path
from typing import Tuple

from pydantic import BaseModel, Field


class Settings(BaseModel):
    """Centralized configuration for vault clients and scripts."""

    lcd_url: str = Field(default="https://lcd.osmosis.zone")
    vault_address: str = Field(default="")
    standard_version: int = Field(default=1, ge=0, le=2**16 - 1)
    extensions: Tuple[str, ...] = Field(default=("lockup", "keeper"))
    timeout_seconds: float = Field(default=30.0, gt=0)
    snapshot_path: Path = Field(default=Path("data/processed/vault_snapshots.parquet"))

    @property
    def lcd_url_normalized(self) -> str:
        """Return the LCD URL without a trailing slash."""
        return self.lcd_url.rstrip("/")


SETTINGS = Settings()
