"""
Shared fixtures: a miniature HYDAT database built in a temporary directory.

Stations
    08MF005  BC  flows 1976-1977, levels Jan-Mar 1976, loads 1965-1966 and
                 Feb 1976, suscon Jan 1976
    08NM083  BC  flows Jan 1976
    05AA008  AB  flows 1976, loads Feb 1976
    01CA003  PE  flows Apr 1976
    02JE013  QC  listed in STATIONS, no data

Day columns past NO_DAYS are deliberately filled with values so tests can
check they are discarded.
"""

import calendar
import sqlite3

import pytest

from hydatdb.config import set_config

STATIONS = [
    # STATION_NUMBER, STATION_NAME, PROV, HYD_STATUS, SED_STATUS, LAT, LON, GROSS, EFFECT, RHBN, REAL_TIME
    ("08MF005", "FRASER RIVER AT HOPE", "BC", "A", "D", 49.38, -121.45, 217000.0, None, 0, 1),
    ("08NM083", "OKANAGAN RIVER NEAR OLIVER", "BC", "A", None, 49.11, -119.56, 7590.0, None, 0, 1),
    ("05AA008", "CROWSNEST RIVER AT FRANK", "AB", "A", "D", 49.6, -114.41, 403.0, None, 1, 1),
    ("01CA003", "CARRUTHERS BROOK NEAR ST. ANTHONY", "PE", "D", None, 46.67, -64.08, 44.4, None, 1, 0),
    ("02JE013", "ST. LAWRENCE RIVER AT LASALLE", "QC", "D", None, 45.42, -73.62, None, None, 0, 0),
]


def _wide_table_sql(table, value_field, symbol_field):
    columns = ["STATION_NUMBER TEXT", "YEAR INTEGER", "MONTH INTEGER", "NO_DAYS INTEGER"]
    if table in ("DLY_FLOWS", "DLY_LEVELS"):
        # extra monthly summary columns that the reshaper must ignore
        columns += ["FULL_MONTH INTEGER", "MONTHLY_MEAN REAL", "MONTHLY_TOTAL REAL"]
    for day in range(1, 32):
        columns.append(f"{value_field}{day} REAL")
        if symbol_field:
            columns.append(f"{symbol_field}{day} TEXT")
    return f"CREATE TABLE {table} ({', '.join(columns)})"


def flow_value(month, day):
    """Synthetic value stored for a (month, day) cell."""
    return float(month * 100 + day)


def flow_symbol(day):
    return {1: "E", 2: "B", 3: "Z"}.get(day)


def _insert_month(conn, table, value_field, symbol_field, station, year, month, no_days=None):
    if no_days is None:
        no_days = calendar.monthrange(year, month)[1]

    columns = ["STATION_NUMBER", "YEAR", "MONTH", "NO_DAYS"]
    values = [station, year, month, no_days]
    for day in range(1, 32):
        columns.append(f"{value_field}{day}")
        values.append(flow_value(month, day))
        if symbol_field:
            columns.append(f"{symbol_field}{day}")
            values.append(flow_symbol(day))

    placeholders = ", ".join("?" for _ in values)
    conn.execute(
        f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})", values
    )


def build_test_hydat(path):
    conn = sqlite3.connect(path)
    conn.execute(
        "CREATE TABLE STATIONS (STATION_NUMBER TEXT, STATION_NAME TEXT, PROV_TERR_STATE_LOC TEXT, "
        "HYD_STATUS TEXT, SED_STATUS TEXT, LATITUDE REAL, LONGITUDE REAL, DRAINAGE_AREA_GROSS REAL, "
        "DRAINAGE_AREA_EFFECT REAL, RHBN INTEGER, REAL_TIME INTEGER)"
    )
    conn.executemany(f"INSERT INTO STATIONS VALUES ({', '.join('?' * 11)})", STATIONS)

    conn.execute(_wide_table_sql("DLY_FLOWS", "FLOW", "FLOW_SYMBOL"))
    conn.execute(_wide_table_sql("DLY_LEVELS", "LEVEL", "LEVEL_SYMBOL"))
    conn.execute(_wide_table_sql("SED_DLY_LOADS", "LOAD", None))
    conn.execute(_wide_table_sql("SED_DLY_SUSCON", "SUSCON", "SUSCON_SYMBOL"))
    conn.execute("CREATE TABLE VERSION (Version TEXT, Date TEXT)")
    conn.execute("INSERT INTO VERSION VALUES ('1.0', '2024-01-15 00:00:00')")

    flows = ("DLY_FLOWS", "FLOW", "FLOW_SYMBOL")
    for month in range(1, 13):
        _insert_month(conn, *flows, "08MF005", 1976, month)
        _insert_month(conn, *flows, "05AA008", 1976, month)
    _insert_month(conn, *flows, "08MF005", 1977, 2, no_days=28)
    _insert_month(conn, *flows, "08NM083", 1976, 1)
    _insert_month(conn, *flows, "01CA003", 1976, 4, no_days=30)

    levels = ("DLY_LEVELS", "LEVEL", "LEVEL_SYMBOL")
    for month in (1, 2, 3):
        _insert_month(conn, *levels, "08MF005", 1976, month)

    loads = ("SED_DLY_LOADS", "LOAD", None)
    for year in (1965, 1966):
        for month in range(1, 13):
            _insert_month(conn, *loads, "08MF005", year, month)
    _insert_month(conn, *loads, "08MF005", 1976, 2, no_days=29)
    _insert_month(conn, *loads, "05AA008", 1976, 2, no_days=29)

    _insert_month(conn, "SED_DLY_SUSCON", "SUSCON", "SUSCON_SYMBOL", "08MF005", 1976, 1)

    conn.commit()
    conn.close()
    return path


@pytest.fixture(scope="session")
def hydat_path(tmp_path_factory):
    """Path to the miniature HYDAT file."""
    return build_test_hydat(tmp_path_factory.mktemp("hydat") / "Hydat.sqlite3")


@pytest.fixture
def hydat_conn(hydat_path):
    """An open connection owned by the test."""
    conn = sqlite3.connect(hydat_path)
    yield conn
    conn.close()


@pytest.fixture(autouse=True)
def reset_config():
    """Drop any configuration a test installed."""
    set_config(None)
    yield
    set_config(None)
