"""
Reshape wide daily HYDAT tables into tidy long form.
"""

import logging

import pandas as pd

from .exceptions import HydatValidationError
from .schema import ID_COLUMNS, WideTable

logger = logging.getLogger(__name__)

_DAY_COLUMN_PATTERN = r"^(?P<field>\D+?)(?P<day>\d+)$"


def _empty_long_frame(table: WideTable) -> pd.DataFrame:
    columns = ["STATION_NUMBER", "Date", "value"]
    if table.has_symbols:
        columns.append("symbol")
    return pd.DataFrame(columns=columns)


def _month_lengths(wide: pd.DataFrame) -> pd.Series:
    """NO_DAYS as numbers, falling back to the calendar where it is missing."""
    first_of_month = pd.to_datetime(
        pd.DataFrame({"year": wide["YEAR"], "month": wide["MONTH"], "day": 1}),
        errors="coerce",
    )
    return pd.to_numeric(wide["NO_DAYS"], errors="coerce").fillna(
        first_of_month.dt.days_in_month
    )


def wide_to_long(wide: pd.DataFrame, table: WideTable) -> pd.DataFrame:
    """
    Turn one-row-per-month data into one row per station and day.

    The input has the ID columns (STATION_NUMBER, YEAR, MONTH, NO_DAYS)
    plus the day-indexed value and symbol columns of ``table``. Days past
    the month's NO_DAYS (day 31 of a 30-day month, day 29 of a non-leap
    February) are discarded, so every output row carries a real calendar
    date.

    Args:
        wide: Rows read from the HYDAT table
        table: Schema of the table the rows came from

    Returns:
        DataFrame with STATION_NUMBER, Date, value and, when the table has
        flag columns, symbol; sorted by Date then STATION_NUMBER
    """
    missing_ids = [col for col in ID_COLUMNS if col not in wide.columns]
    if missing_ids:
        raise HydatValidationError(
            f"{table.table} rows are missing required columns: {', '.join(missing_ids)}"
        )

    if wide.empty:
        return _empty_long_frame(table)

    day_columns = [col for col in table.day_columns if col in wide.columns]
    if not day_columns:
        logger.warning(f"No day columns of {table.table} found in the input rows")
        return _empty_long_frame(table)

    wide = wide.assign(NO_DAYS=_month_lengths(wide))

    # 1. one row per (station, year, month, source column)
    long = wide.melt(
        id_vars=ID_COLUMNS,
        value_vars=day_columns,
        var_name="variable",
        value_name="temp",
    )

    # 2. day of month from the trailing digits, field kind from the prefix
    parts = long["variable"].str.extract(_DAY_COLUMN_PATTERN)
    long["DAY"] = parts["day"].astype(int)
    long["kind"] = parts["field"].map(table.field_kinds())

    # 3. back to one row per day with a value and a symbol column
    tidy = long.pivot(
        index=ID_COLUMNS + ["DAY"], columns="kind", values="temp"
    ).reset_index()
    tidy.columns.name = None
    for kind in set(table.field_kinds().values()):
        if kind not in tidy.columns:
            tidy[kind] = None

    # 4. sentinel text such as "" becomes NaN
    tidy["value"] = pd.to_numeric(tidy["value"], errors="coerce")

    # 5. the month's own day count decides which trailing days are real
    tidy = tidy[tidy["DAY"] <= tidy["NO_DAYS"]]
    if tidy.empty:
        return _empty_long_frame(table)

    # 6. calendar date; anything NO_DAYS let through that is not a real date is dropped
    tidy = tidy.assign(
        Date=pd.to_datetime(
            pd.DataFrame(
                {"year": tidy["YEAR"], "month": tidy["MONTH"], "day": tidy["DAY"]}
            ),
            errors="coerce",
        )
    )
    invalid = tidy["Date"].isna()
    if invalid.any():
        logger.warning(
            f"Dropping {int(invalid.sum())} {table.table} rows whose NO_DAYS exceeds the calendar month"
        )
        tidy = tidy[~invalid]

    columns = ["STATION_NUMBER", "Date", "value"]
    if table.has_symbols:
        columns.append("symbol")

    tidy = tidy[columns].sort_values(["Date", "STATION_NUMBER"], kind="stable")
    logger.debug(f"Reshaped {len(wide)} {table.table} rows into {len(tidy)} daily rows")
    return tidy.reset_index(drop=True)
