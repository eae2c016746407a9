"""
High-level functions for realtime hydrometric data.
"""

import logging
from contextlib import nullcontext
from typing import ContextManager, Dict, List, Optional

import pandas as pd

from ..exceptions import HydatNoDataError, HydatValidationError
from ..stations import (
    StationArg,
    normalize_codes,
    report_missing_stations,
    validate_prov_terr_state_loc,
)
from .client import FREQUENCIES, REALTIME_OUTPUT_COLUMNS, RealtimeClient
from .exceptions import RealtimeQueryError

logger = logging.getLogger(__name__)


def _client_scope(client: Optional[RealtimeClient]) -> ContextManager[RealtimeClient]:
    """Use the caller's client as-is, or open one that is closed on exit."""
    if client is not None:
        return nullcontext(client)
    return RealtimeClient()


def fetch_realtime_stations(
    prov_terr_state_loc: StationArg = None,
    client: Optional[RealtimeClient] = None,
) -> pd.DataFrame:
    """
    List the stations reporting realtime data.

    Args:
        prov_terr_state_loc: Optional jurisdiction code(s) to filter by
        client: Optional RealtimeClient (a temporary one is used if None)

    Returns:
        DataFrame with STATION_NUMBER, STATION_NAME, LATITUDE, LONGITUDE,
        PROV_TERR_STATE_LOC and TIMEZONE
    """
    provinces = validate_prov_terr_state_loc(prov_terr_state_loc)

    with _client_scope(client) as realtime:
        df = realtime.get_station_frame()

    if provinces:
        df = df[df["PROV_TERR_STATE_LOC"].isin(provinces)]

    return df.sort_values("STATION_NUMBER").reset_index(drop=True)


def fetch_realtime(
    station_number: StationArg = None,
    prov_terr_state_loc: StationArg = None,
    frequency: str = "daily",
    client: Optional[RealtimeClient] = None,
) -> pd.DataFrame:
    """
    Download provisional realtime readings (the last 30 days) from the Datamart.

    Stations are looked up in the realtime station list to find the
    province their files are filed under. ``station_number`` and
    ``prov_terr_state_loc`` combine the same way as for the HYDAT
    functions: the result covers both.

    Args:
        station_number: Station number(s), e.g. ``"08MF005"``
        prov_terr_state_loc: Jurisdiction code(s); every realtime station
            in them is downloaded
        frequency: ``daily`` or ``hourly`` files
        client: Optional RealtimeClient (a temporary one is used if None)

    Returns:
        DataFrame with STATION_NUMBER, PROV_TERR_STATE_LOC, Date (UTC),
        Parameter (``Flow`` / ``Level``), Value, Grade, Symbol and Code,
        sorted by station then Date

    Raises:
        HydatValidationError: No station filter, bad jurisdiction or frequency
        HydatNoDataError: None of the stations returned readings
        RealtimeConnectionError: The Datamart could not be reached
    """
    if frequency not in FREQUENCIES:
        raise HydatValidationError(
            f"Invalid frequency {frequency!r}", f"choose one of {', '.join(FREQUENCIES)}"
        )

    provinces = validate_prov_terr_state_loc(prov_terr_state_loc)
    requested = normalize_codes(station_number)
    if requested is None and provinces is None:
        raise HydatValidationError(
            "Realtime queries need station_number and/or prov_terr_state_loc"
        )

    frames: List[pd.DataFrame] = []

    with _client_scope(client) as realtime:
        station_list = realtime.get_station_frame()
        prov_by_station: Dict[str, str] = dict(
            zip(station_list["STATION_NUMBER"], station_list["PROV_TERR_STATE_LOC"])
        )

        stations = list(requested or [])
        if provinces:
            in_provinces = station_list[station_list["PROV_TERR_STATE_LOC"].isin(provinces)]
            stations.extend(sorted(in_provinces["STATION_NUMBER"]))
        stations = list(dict.fromkeys(stations))

        for stn in stations:
            prov = prov_by_station.get(stn)
            if prov is None:
                logger.info(f"{stn} is not in the realtime station list")
                continue

            try:
                data = realtime.get_station_data(stn, prov, frequency)
            except RealtimeQueryError as e:
                logger.info(f"No realtime data for {stn}: {e}")
                continue

            logger.debug(f"Retrieved {len(data)} realtime rows for {stn}")
            if not data.empty:
                frames.append(data.assign(PROV_TERR_STATE_LOC=prov))

    if not frames:
        raise HydatNoDataError("No realtime data for the requested station(s)")

    result = pd.concat(frames, ignore_index=True)
    columns = REALTIME_OUTPUT_COLUMNS[:1] + ["PROV_TERR_STATE_LOC"] + REALTIME_OUTPUT_COLUMNS[1:]
    result = result[columns].sort_values(["STATION_NUMBER", "Date"], kind="stable")

    report_missing_stations(stations, result["STATION_NUMBER"].unique())
    return result.reset_index(drop=True)
