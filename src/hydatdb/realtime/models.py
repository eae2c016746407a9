"""
Data models for realtime hydrometric stations.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class RealtimeStation:
    """A station listed in the Datamart hydrometric station list."""

    station_number: str
    name: str
    latitude: float
    longitude: float
    prov_terr_state_loc: str
    timezone: Optional[str] = None
