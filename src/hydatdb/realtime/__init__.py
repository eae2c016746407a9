"""
Realtime hydrometric data from the MSC Datamart.

Environment and Climate Change Canada publishes the last 30 days of
provisional water level and discharge readings for realtime stations as
CSV files, one per station, daily or hourly.

Data source:
- Datamart: https://dd.weather.gc.ca/hydrometric/
- Station list: https://dd.weather.gc.ca/hydrometric/doc/hydrometric_StationList.csv
"""

from .client import RealtimeClient, parse_realtime_csv, parse_station_list
from .convenience import fetch_realtime, fetch_realtime_stations
from .exceptions import RealtimeConnectionError, RealtimeError, RealtimeQueryError
from .models import RealtimeStation

__all__ = [
    "RealtimeClient",
    "parse_realtime_csv",
    "parse_station_list",
    "fetch_realtime",
    "fetch_realtime_stations",
    "RealtimeError",
    "RealtimeConnectionError",
    "RealtimeQueryError",
    "RealtimeStation",
]
