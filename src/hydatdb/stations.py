"""
Resolve which HYDAT stations a query covers.
"""

import logging
import sqlite3
from typing import Iterable, List, Optional, Sequence, Union

from .exceptions import HydatValidationError
from .query import Query

logger = logging.getLogger(__name__)

# Jurisdictions that appear in STATIONS.PROV_TERR_STATE_LOC: the Canadian
# provinces and territories plus the US states hosting border stations.
PROV_TERR_STATE_CODES = (
    "AB",
    "BC",
    "MB",
    "NB",
    "NL",
    "NS",
    "NT",
    "NU",
    "ON",
    "PE",
    "QC",
    "SK",
    "YT",
    "AK",
    "ID",
    "ME",
    "MN",
    "MT",
    "ND",
    "NH",
    "NY",
    "VT",
    "WA",
)

StationArg = Optional[Union[str, Sequence[str]]]


def normalize_codes(values: StationArg) -> Optional[List[str]]:
    """Accept a single code or a sequence; upper-case and de-duplicate in order."""
    if values is None:
        return None
    if isinstance(values, str):
        values = [values]
    return list(dict.fromkeys(str(v).strip().upper() for v in values))


def validate_prov_terr_state_loc(prov_terr_state_loc: StationArg) -> Optional[List[str]]:
    """
    Check jurisdiction codes against PROV_TERR_STATE_CODES.

    Returns:
        The normalized code list, or None if no codes were given

    Raises:
        HydatValidationError: naming every unrecognized code
    """
    codes = normalize_codes(prov_terr_state_loc)
    if codes is None:
        return None

    invalid = [code for code in codes if code not in PROV_TERR_STATE_CODES]
    if invalid:
        raise HydatValidationError(
            f"Invalid prov_terr_state_loc value(s): {', '.join(invalid)}",
            f"expected any of {', '.join(PROV_TERR_STATE_CODES)}",
        )
    return codes


def resolve_stations(
    conn: sqlite3.Connection,
    station_number: StationArg = None,
    prov_terr_state_loc: StationArg = None,
) -> List[str]:
    """
    Determine the station numbers to query.

    With neither argument every station in HYDAT is returned. Explicit
    station numbers are used as given without checking that they exist.
    When both arguments are supplied the result is the union of the listed
    stations and the stations located in the listed jurisdictions.

    Args:
        conn: Open HYDAT connection
        station_number: Station number or list of station numbers
        prov_terr_state_loc: Jurisdiction code or list of codes

    Returns:
        Station numbers, de-duplicated, explicit stations first

    Raises:
        HydatValidationError: If a jurisdiction code is not recognized
    """
    provinces = validate_prov_terr_state_loc(prov_terr_state_loc)
    stations = normalize_codes(station_number)

    if stations is None and provinces is None:
        df = Query().select("STATION_NUMBER").from_("STATIONS").read(conn)
        return df["STATION_NUMBER"].tolist()

    resolved = list(stations or [])

    if provinces:
        df = (
            Query()
            .select("STATION_NUMBER")
            .from_("STATIONS")
            .where_in("PROV_TERR_STATE_LOC", provinces)
            .order_by("STATION_NUMBER")
            .read(conn)
        )
        resolved.extend(df["STATION_NUMBER"].tolist())

    return list(dict.fromkeys(resolved))


def report_missing_stations(
    requested: Iterable[str], returned: Iterable[str]
) -> List[str]:
    """
    Log the requested stations that produced no rows.

    Returns:
        The missing station numbers, in request order
    """
    returned_set = set(returned)
    missing = [stn for stn in dict.fromkeys(requested) if stn not in returned_set]

    if missing:
        logger.info(
            f"The following station(s) were not retrieved: {', '.join(missing)}. "
            "Check station number or data availability."
        )
    else:
        logger.info("All stations successfully retrieved")
    return missing
