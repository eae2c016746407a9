"""
Python client for the HYDAT national water data archive.

Query daily flows, levels, sediment and station metadata from a local
HYDAT SQLite file, and realtime readings from the MSC Datamart, as tidy
pandas DataFrames.
"""

try:
    from importlib import metadata

    __version__ = metadata.version(__name__)
except Exception:
    __version__ = "unknown"

from . import fetch
from .config import HydatConfig, get_config, set_config
from .connection import ConnectionSource, HydatHandle, HydatPath, hydat_connection
from .dates import DateRange, plan_date_range
from .exceptions import (
    HydatConnectionError,
    HydatDBError,
    HydatNoDataError,
    HydatValidationError,
)
from .fetch import (
    fetch_daily,
    fetch_daily_flows,
    fetch_daily_levels,
    fetch_data_symbols,
    fetch_sed_daily_loads,
    fetch_sed_daily_suscon,
    fetch_stations,
    fetch_version,
    list_daily_tables,
)
from .realtime import (
    RealtimeClient,
    RealtimeConnectionError,
    RealtimeError,
    RealtimeQueryError,
    RealtimeStation,
    fetch_realtime,
    fetch_realtime_stations,
)
from .reshape import wide_to_long
from .schema import WIDE_TABLES, WideTable
from .stations import PROV_TERR_STATE_CODES, resolve_stations
from .symbols import SYMBOL_OUTPUT_CHOICES, data_symbols, translate_symbols

__all__ = [
    # Configuration and connections
    "HydatConfig",
    "get_config",
    "set_config",
    "ConnectionSource",
    "HydatPath",
    "HydatHandle",
    "hydat_connection",
    # HYDAT query functions
    "fetch_daily",
    "fetch_daily_flows",
    "fetch_daily_levels",
    "fetch_sed_daily_loads",
    "fetch_sed_daily_suscon",
    "fetch_stations",
    "fetch_data_symbols",
    "fetch_version",
    "list_daily_tables",
    # Realtime
    "RealtimeClient",
    "RealtimeStation",
    "fetch_realtime",
    "fetch_realtime_stations",
    # Building blocks
    "DateRange",
    "plan_date_range",
    "WideTable",
    "WIDE_TABLES",
    "wide_to_long",
    "PROV_TERR_STATE_CODES",
    "resolve_stations",
    "SYMBOL_OUTPUT_CHOICES",
    "data_symbols",
    "translate_symbols",
    # Exceptions
    "HydatDBError",
    "HydatValidationError",
    "HydatNoDataError",
    "HydatConnectionError",
    "RealtimeError",
    "RealtimeConnectionError",
    "RealtimeQueryError",
    # Module
    "fetch",
]
