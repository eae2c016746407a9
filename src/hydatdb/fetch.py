"""
Tidy query functions for the HYDAT database.

Every daily function follows the same pipeline:

    validate arguments
        ↓
    open HYDAT (or reuse the caller's connection)
        ↓
    resolve stations ─── station_number ∪ prov_terr_state_loc
        ↓
    read the wide table ─── WHERE STATION_NUMBER IN (...) AND YEAR BETWEEN ...
        ↓
    wide_to_long() ─── one row per station and day
        ↓
    exact date filter, symbol translation, column renaming, sort by Date
        ↓
    report requested stations that returned nothing

Usage:
    >>> from hydatdb import fetch_daily_flows
    >>> df = fetch_daily_flows(
    ...     station_number=["02JE013", "08MF005"],
    ...     start_date="1996-01-01",
    ...     end_date="2000-01-01",
    ... )

    >>> fetch_daily_flows(prov_terr_state_loc="PE", symbol_output="english")
"""

import logging
from typing import List, Optional, Union

import pandas as pd

from .connection import HydatPathLike, hydat_connection
from .dates import DateArg, plan_date_range
from .exceptions import HydatNoDataError, HydatValidationError
from .query import Query, read_by_keys
from .reshape import wide_to_long
from .schema import (
    DLY_FLOWS,
    DLY_LEVELS,
    SED_DLY_LOADS,
    SED_DLY_SUSCON,
    WIDE_TABLES,
    WideTable,
)
from .stations import (
    StationArg,
    report_missing_stations,
    resolve_stations,
    validate_prov_terr_state_loc,
)
from .symbols import data_symbols, translate_symbols, validate_symbol_output

logger = logging.getLogger(__name__)

STATION_COLUMNS = [
    "STATION_NUMBER",
    "STATION_NAME",
    "PROV_TERR_STATE_LOC",
    "HYD_STATUS",
    "SED_STATUS",
    "LATITUDE",
    "LONGITUDE",
    "DRAINAGE_AREA_GROSS",
    "DRAINAGE_AREA_EFFECT",
    "RHBN",
    "REAL_TIME",
]

STATUS_CODES = {"A": "ACTIVE", "D": "DISCONTINUED"}


def _resolve_table(table: Union[str, WideTable]) -> WideTable:
    if isinstance(table, WideTable):
        return table
    key = str(table).strip().lower()
    if key in WIDE_TABLES:
        return WIDE_TABLES[key]
    # also accept the HYDAT table name itself, e.g. "DLY_FLOWS"
    for wide_table in WIDE_TABLES.values():
        if wide_table.table.lower() == key:
            return wide_table
    raise HydatValidationError(
        f"Unknown daily table {table!r}",
        f"choose one of {', '.join(WIDE_TABLES)}",
    )


def fetch_daily(
    table: Union[str, WideTable],
    station_number: StationArg = None,
    hydat_path: Optional[HydatPathLike] = None,
    prov_terr_state_loc: StationArg = None,
    start_date: DateArg = None,
    end_date: DateArg = None,
    symbol_output: str = "code",
) -> pd.DataFrame:
    """
    Fetch any wide daily HYDAT table as a tidy DataFrame.

    ``station_number`` and ``prov_terr_state_loc`` can both be supplied, in
    which case their stations are combined. If both are omitted every
    station in HYDAT is queried, which is a very large result.

    Args:
        table: Key of WIDE_TABLES (``flows``, ``levels``, ``sed_loads``,
            ``sed_suscon``), a HYDAT table name, or a WideTable
        station_number: Station number or list of station numbers
        hydat_path: Path to Hydat.sqlite3, an open sqlite3.Connection, or
            None for the configured default
        prov_terr_state_loc: Jurisdiction code(s), e.g. ``"BC"`` or ``["BC", "AB"]``
        start_date: First date, ``YYYY-MM-DD``, inclusive. None for no bound.
        end_date: Last date, ``YYYY-MM-DD``, inclusive. None for no bound.
        symbol_output: ``code``, ``english`` or ``french`` form of the Symbol column

    Returns:
        DataFrame with STATION_NUMBER, Date, Parameter, Value and, for
        tables with flags, Symbol; sorted by Date

    Raises:
        HydatValidationError: Invalid table, jurisdiction, date or symbol_output
        HydatNoDataError: No rows match the request
    """
    wide_table = _resolve_table(table)
    symbol_output = validate_symbol_output(symbol_output)
    date_range = plan_date_range(start_date, end_date)
    validate_prov_terr_state_loc(prov_terr_state_loc)

    with hydat_connection(hydat_path) as conn:
        stations = resolve_stations(conn, station_number, prov_terr_state_loc)

        wide = read_by_keys(
            conn,
            wide_table.table,
            "STATION_NUMBER",
            stations,
            columns=wide_table.columns,
            year_range=date_range.year_range if date_range else None,
        )

    if wide.empty:
        raise HydatNoDataError(
            f"No {wide_table.parameter.lower()} data for this station in HYDAT"
        )

    tidy = wide_to_long(wide, wide_table)

    if date_range is not None:
        tidy = tidy[date_range.contains(tidy["Date"])]

    if tidy.empty:
        raise HydatNoDataError(
            f"No {wide_table.parameter.lower()} data for this station in HYDAT",
            "nothing falls inside the requested date range" if date_range else None,
        )

    tidy = tidy.rename(columns={"value": "Value", "symbol": "Symbol"})
    tidy["Parameter"] = wide_table.parameter

    if wide_table.has_symbols:
        tidy = translate_symbols(tidy, column="Symbol", symbol_output=symbol_output)

    tidy = tidy[wide_table.output_columns]
    tidy = tidy.sort_values("Date", kind="stable").reset_index(drop=True)

    report_missing_stations(stations, tidy["STATION_NUMBER"].unique())
    return tidy


def fetch_daily_flows(
    station_number: StationArg = None,
    hydat_path: Optional[HydatPathLike] = None,
    prov_terr_state_loc: StationArg = None,
    start_date: DateArg = None,
    end_date: DateArg = None,
    symbol_output: str = "code",
) -> pd.DataFrame:
    """
    Daily mean discharge from the DLY_FLOWS table.

    Value is in m^3/s and Parameter is always ``Flow``. See fetch_daily()
    for the arguments.

    Examples:
        >>> fetch_daily_flows(station_number="08MF005", start_date="1996-01-01", end_date="2000-01-01")
    """
    return fetch_daily(
        DLY_FLOWS,
        station_number=station_number,
        hydat_path=hydat_path,
        prov_terr_state_loc=prov_terr_state_loc,
        start_date=start_date,
        end_date=end_date,
        symbol_output=symbol_output,
    )


def fetch_daily_levels(
    station_number: StationArg = None,
    hydat_path: Optional[HydatPathLike] = None,
    prov_terr_state_loc: StationArg = None,
    start_date: DateArg = None,
    end_date: DateArg = None,
    symbol_output: str = "code",
) -> pd.DataFrame:
    """Daily mean water level (m) from the DLY_LEVELS table. Parameter is ``Level``."""
    return fetch_daily(
        DLY_LEVELS,
        station_number=station_number,
        hydat_path=hydat_path,
        prov_terr_state_loc=prov_terr_state_loc,
        start_date=start_date,
        end_date=end_date,
        symbol_output=symbol_output,
    )


def fetch_sed_daily_loads(
    station_number: StationArg = None,
    hydat_path: Optional[HydatPathLike] = None,
    prov_terr_state_loc: StationArg = None,
    start_date: DateArg = None,
    end_date: DateArg = None,
) -> pd.DataFrame:
    """
    Daily suspended sediment load (tonnes) from SED_DLY_LOADS.

    The table carries no flags, so the result has no Symbol column.
    """
    return fetch_daily(
        SED_DLY_LOADS,
        station_number=station_number,
        hydat_path=hydat_path,
        prov_terr_state_loc=prov_terr_state_loc,
        start_date=start_date,
        end_date=end_date,
    )


def fetch_sed_daily_suscon(
    station_number: StationArg = None,
    hydat_path: Optional[HydatPathLike] = None,
    prov_terr_state_loc: StationArg = None,
    start_date: DateArg = None,
    end_date: DateArg = None,
    symbol_output: str = "code",
) -> pd.DataFrame:
    """Daily suspended sediment concentration (mg/L) from SED_DLY_SUSCON."""
    return fetch_daily(
        SED_DLY_SUSCON,
        station_number=station_number,
        hydat_path=hydat_path,
        prov_terr_state_loc=prov_terr_state_loc,
        start_date=start_date,
        end_date=end_date,
        symbol_output=symbol_output,
    )


def fetch_stations(
    station_number: StationArg = None,
    hydat_path: Optional[HydatPathLike] = None,
    prov_terr_state_loc: StationArg = None,
) -> pd.DataFrame:
    """
    Station metadata from the STATIONS table.

    HYD_STATUS and SED_STATUS are decoded to ``ACTIVE`` / ``DISCONTINUED``;
    RHBN and REAL_TIME are booleans.

    Args:
        station_number: Station number or list of station numbers
        hydat_path: Path to Hydat.sqlite3 or an open sqlite3.Connection
        prov_terr_state_loc: Jurisdiction code(s)

    Returns:
        One row per station, sorted by STATION_NUMBER

    Raises:
        HydatValidationError: Invalid jurisdiction code
        HydatNoDataError: None of the requested stations exist
    """
    validate_prov_terr_state_loc(prov_terr_state_loc)

    with hydat_connection(hydat_path) as conn:
        stations = resolve_stations(conn, station_number, prov_terr_state_loc)
        df = read_by_keys(conn, "STATIONS", "STATION_NUMBER", stations, columns=STATION_COLUMNS)

    if df.empty:
        raise HydatNoDataError("No stations in HYDAT match the request")

    for column in ("HYD_STATUS", "SED_STATUS"):
        df[column] = df[column].map(STATUS_CODES)
    for column in ("RHBN", "REAL_TIME"):
        df[column] = pd.to_numeric(df[column], errors="coerce").fillna(0).astype(bool)

    df = df.sort_values("STATION_NUMBER").reset_index(drop=True)

    report_missing_stations(stations, df["STATION_NUMBER"])
    return df


def fetch_data_symbols() -> pd.DataFrame:
    """The HYDAT symbol lookup (SYMBOL_ID, SYMBOL_EN, SYMBOL_FR)."""
    return data_symbols()


def fetch_version(hydat_path: Optional[HydatPathLike] = None) -> pd.DataFrame:
    """Release version and date of a HYDAT file, from its VERSION table."""
    with hydat_connection(hydat_path) as conn:
        df = Query().select("Version", "Date").from_("VERSION").read(conn)

    if df.empty:
        raise HydatNoDataError("HYDAT VERSION table is empty")

    df["Date"] = pd.to_datetime(df["Date"], errors="coerce")
    return df


def list_daily_tables() -> List[str]:
    """Keys accepted by fetch_daily()."""
    return list(WIDE_TABLES)
