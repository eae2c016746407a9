"""
MSC Datamart client for realtime hydrometric data.
"""

import io
import logging
from typing import Any, Dict, List, Optional

import httpx
import pandas as pd

from ..config import get_config
from .exceptions import RealtimeConnectionError, RealtimeError, RealtimeQueryError
from .models import RealtimeStation

logger = logging.getLogger(__name__)

FREQUENCIES = ("daily", "hourly")

STATION_LIST_COLUMNS = [
    "STATION_NUMBER",
    "STATION_NAME",
    "LATITUDE",
    "LONGITUDE",
    "PROV_TERR_STATE_LOC",
    "TIMEZONE",
]

# Datamart CSV columns, by position; the published headers are bilingual.
REALTIME_CSV_COLUMNS = [
    "STATION_NUMBER",
    "Date",
    "Level",
    "Level_GRADE",
    "Level_SYMBOL",
    "Level_CODE",
    "Flow",
    "Flow_GRADE",
    "Flow_SYMBOL",
    "Flow_CODE",
]

REALTIME_OUTPUT_COLUMNS = [
    "STATION_NUMBER",
    "Date",
    "Parameter",
    "Value",
    "Grade",
    "Symbol",
    "Code",
]


def parse_station_list(text: str) -> pd.DataFrame:
    """Parse ``hydrometric_StationList.csv`` into STATION_LIST_COLUMNS."""
    try:
        df = pd.read_csv(io.StringIO(text), dtype=str)
    except pd.errors.EmptyDataError as e:
        raise RealtimeQueryError("Station list is empty") from e

    if len(df.columns) < len(STATION_LIST_COLUMNS):
        raise RealtimeQueryError(
            f"Station list has {len(df.columns)} columns, expected {len(STATION_LIST_COLUMNS)}"
        )

    df = df.iloc[:, : len(STATION_LIST_COLUMNS)]
    df.columns = STATION_LIST_COLUMNS
    df["LATITUDE"] = pd.to_numeric(df["LATITUDE"], errors="coerce")
    df["LONGITUDE"] = pd.to_numeric(df["LONGITUDE"], errors="coerce")
    df["STATION_NUMBER"] = df["STATION_NUMBER"].str.strip()
    df["PROV_TERR_STATE_LOC"] = df["PROV_TERR_STATE_LOC"].str.strip().str.upper()
    return df


def parse_realtime_csv(text: str) -> pd.DataFrame:
    """
    Parse a station's realtime CSV into a tidy long DataFrame.

    Each row of the file holds a water level and a discharge reading with
    their grade, symbol and QA/QC code. The result has one row per reading
    (Parameter ``Level`` or ``Flow``); readings without a value are dropped.
    Dates are converted to UTC.
    """
    try:
        raw = pd.read_csv(io.StringIO(text), dtype=str)
    except pd.errors.EmptyDataError:
        return pd.DataFrame(columns=REALTIME_OUTPUT_COLUMNS)

    if len(raw.columns) != len(REALTIME_CSV_COLUMNS):
        raise RealtimeQueryError(
            f"Realtime file has {len(raw.columns)} columns, expected {len(REALTIME_CSV_COLUMNS)}"
        )
    raw.columns = REALTIME_CSV_COLUMNS
    raw["Date"] = pd.to_datetime(raw["Date"], utc=True, errors="coerce")

    bad_dates = raw["Date"].isna()
    if bad_dates.any():
        logger.warning(f"Skipping {int(bad_dates.sum())} realtime rows with unparseable dates")
        raw = raw[~bad_dates]

    frames = []
    for parameter in ("Level", "Flow"):
        frame = pd.DataFrame(
            {
                "STATION_NUMBER": raw["STATION_NUMBER"],
                "Date": raw["Date"],
                "Parameter": parameter,
                "Value": pd.to_numeric(raw[parameter], errors="coerce"),
                "Grade": raw[f"{parameter}_GRADE"],
                "Symbol": raw[f"{parameter}_SYMBOL"],
                "Code": raw[f"{parameter}_CODE"],
            }
        )
        frames.append(frame[frame["Value"].notna()])

    tidy = pd.concat(frames, ignore_index=True)
    return tidy[REALTIME_OUTPUT_COLUMNS]


class RealtimeClient:
    """
    Client for the realtime hydrometric files on the MSC Datamart.

    The Datamart publishes the last 30 days of provisional data for each
    realtime station as CSV, daily or hourly, grouped by province.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        config = get_config().with_overrides(realtime_base_url=base_url, timeout=timeout)
        self.base_url = config.realtime_base_url.rstrip("/")
        self.timeout = config.timeout
        self._client = httpx.Client(
            timeout=self.timeout,
            headers={
                "User-Agent": "hydatdb-realtime-client/0.1.0",
                "Accept": "text/csv",
            },
            follow_redirects=True,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "RealtimeClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def _make_request(self, path: str, params: Optional[Dict[str, str]] = None) -> str:
        """GET ``path`` under the base URL and return the body as text."""
        url = f"{self.base_url}/{path}"

        try:
            response = self._client.get(url, params=params)
            response.raise_for_status()
            return response.text

        except httpx.TimeoutException as e:
            raise RealtimeConnectionError(f"Request timeout after {self.timeout}s") from e
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise RealtimeQueryError(f"File not found: {url}") from e
            elif e.response.status_code == 429:
                raise RealtimeConnectionError("Rate limit exceeded") from e
            elif e.response.status_code >= 500:
                raise RealtimeConnectionError("Datamart temporarily unavailable") from e
            else:
                raise RealtimeConnectionError(
                    f"HTTP error {e.response.status_code}: {e}"
                ) from e
        except httpx.RequestError as e:
            raise RealtimeConnectionError(f"Network error: {e}") from e

    def get_station_list(self) -> List[RealtimeStation]:
        """
        Get the list of stations reporting realtime data.

        Returns:
            List of RealtimeStation objects
        """
        df = self.get_station_frame()

        stations = []
        for row in df.itertuples(index=False):
            if not isinstance(row.STATION_NUMBER, str) or not row.STATION_NUMBER:
                continue
            stations.append(
                RealtimeStation(
                    station_number=row.STATION_NUMBER,
                    name=row.STATION_NAME,
                    latitude=row.LATITUDE,
                    longitude=row.LONGITUDE,
                    prov_terr_state_loc=row.PROV_TERR_STATE_LOC,
                    timezone=row.TIMEZONE if isinstance(row.TIMEZONE, str) else None,
                )
            )
        return stations

    def get_station_frame(self) -> pd.DataFrame:
        """The realtime station list as a DataFrame."""
        text = self._make_request("doc/hydrometric_StationList.csv")
        return parse_station_list(text)

    def get_station_csv(
        self, station_number: str, prov_terr_state_loc: str, frequency: str = "daily"
    ) -> str:
        """
        Download the raw realtime CSV for one station.

        Args:
            station_number: Station number, e.g. ``08MF005``
            prov_terr_state_loc: Province the station is filed under, e.g. ``BC``
            frequency: ``daily`` or ``hourly``

        Returns:
            CSV text
        """
        if frequency not in FREQUENCIES:
            raise RealtimeQueryError(
                f"Invalid frequency {frequency!r}, choose one of {', '.join(FREQUENCIES)}"
            )

        prov = prov_terr_state_loc.upper()
        path = f"csv/{prov}/{frequency}/{prov}_{station_number}_{frequency}_hydrometric.csv"
        return self._make_request(path)

    def get_station_data(
        self, station_number: str, prov_terr_state_loc: str, frequency: str = "daily"
    ) -> pd.DataFrame:
        """Download and parse one station's realtime readings."""
        text = self.get_station_csv(station_number, prov_terr_state_loc, frequency)
        try:
            return parse_realtime_csv(text)
        except RealtimeError:
            raise
        except (ValueError, KeyError) as e:
            raise RealtimeQueryError(
                f"Failed to parse realtime data for {station_number}: {e}"
            ) from e
