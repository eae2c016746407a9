"""
Configuration for hydatdb.

Values come from keyword arguments or the environment:

- ``HYDATDB_HYDAT_PATH``: location of the HYDAT SQLite file
- ``HYDATDB_REALTIME_URL``: base URL of the MSC Datamart hydrometric tree
- ``HYDATDB_TIMEOUT``: HTTP timeout in seconds for realtime requests
"""

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

DEFAULT_HYDAT_PATH = Path.home() / ".hydatdb" / "Hydat.sqlite3"
DEFAULT_REALTIME_URL = "https://dd.weather.gc.ca/hydrometric"
DEFAULT_TIMEOUT = 30


@dataclass(frozen=True)
class HydatConfig:
    """Settings shared by the HYDAT and realtime functions."""

    hydat_path: Path = field(default_factory=lambda: DEFAULT_HYDAT_PATH)
    realtime_base_url: str = DEFAULT_REALTIME_URL
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls) -> "HydatConfig":
        """Build a configuration from ``HYDATDB_*`` environment variables."""
        kwargs: dict = {}

        hydat_path = os.environ.get("HYDATDB_HYDAT_PATH")
        if hydat_path:
            kwargs["hydat_path"] = Path(hydat_path).expanduser()

        base_url = os.environ.get("HYDATDB_REALTIME_URL")
        if base_url:
            kwargs["realtime_base_url"] = base_url.rstrip("/")

        timeout = os.environ.get("HYDATDB_TIMEOUT")
        if timeout:
            try:
                kwargs["timeout"] = float(timeout)
            except ValueError:
                logger.warning(
                    f"Ignoring HYDATDB_TIMEOUT={timeout!r}, expected a number of seconds"
                )

        return cls(**kwargs)

    def with_overrides(self, **overrides: Any) -> "HydatConfig":
        """Return a copy with the given non-None fields replaced."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


_config: Optional[HydatConfig] = None


def get_config() -> HydatConfig:
    """Return the process-wide configuration, reading the environment on first use."""
    global _config
    if _config is None:
        _config = HydatConfig.from_env()
    return _config


def set_config(config: Optional[HydatConfig]) -> None:
    """Replace the process-wide configuration. ``None`` re-reads the environment."""
    global _config
    _config = config
