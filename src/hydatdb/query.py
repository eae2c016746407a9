"""
SQL query building for HYDAT tables.

Queries carry their bound parameters alongside the SQL text so values are
never interpolated into the statement.
"""

import logging
import math
import sqlite3
from typing import Any, List, Optional, Sequence, Tuple

import pandas as pd

logger = logging.getLogger(__name__)

# Stay under SQLITE_MAX_VARIABLE_NUMBER on older SQLite builds (999).
DEFAULT_CHUNK_SIZE = 500


class Query:
    """Chainable SELECT builder for a single HYDAT table."""

    def __init__(self) -> None:
        self._select_clause: str = "*"
        self._from_clause: str = ""
        self._where_conditions: List[str] = []
        self._params: List[Any] = []
        self._order_by_clause: Optional[str] = None

    def select(self, *columns: str) -> "Query":
        """Set the SELECT clause.

        Args:
            *columns: Column names to select. Use "*" for all columns.

        Returns:
            Query: This Query instance for method chaining.
        """
        if columns:
            self._select_clause = ", ".join(columns)
        return self

    def from_(self, table: str) -> "Query":
        """Set the FROM clause.

        Args:
            table: Name of the table to query from.

        Returns:
            Query: This Query instance for method chaining.
        """
        self._from_clause = table
        return self

    def where(self, condition: str, *params: Any) -> "Query":
        """Add a WHERE condition with ``?`` placeholders for ``params``.

        Returns:
            Query: This Query instance for method chaining.
        """
        self._where_conditions.append(condition)
        self._params.extend(params)
        return self

    def where_in(self, column: str, values: Sequence[Any]) -> "Query":
        """Add a ``column IN (...)`` condition with one placeholder per value."""
        placeholders = ", ".join("?" for _ in values)
        return self.where(f"{column} IN ({placeholders})", *values)

    def where_between(self, column: str, low: Any, high: Any) -> "Query":
        """Add an inclusive ``column BETWEEN low AND high`` condition."""
        return self.where(f"{column} BETWEEN ? AND ?", low, high)

    def order_by(self, column: str, direction: str = "ASC") -> "Query":
        """Set the ORDER BY clause.

        Args:
            column: Column name to order by.
            direction: Sort direction ("ASC" or "DESC").

        Returns:
            Query: This Query instance for method chaining.
        """
        self._order_by_clause = f"{column} {direction}"
        return self

    def to_sql(self) -> Tuple[str, List[Any]]:
        """Build the SQL string and its parameter list."""
        sql = f"SELECT {self._select_clause} FROM {self._from_clause}"

        if self._where_conditions:
            sql += " WHERE " + " AND ".join(self._where_conditions)

        if self._order_by_clause:
            sql += f" ORDER BY {self._order_by_clause}"

        return sql, list(self._params)

    def read(self, conn: sqlite3.Connection) -> pd.DataFrame:
        """Execute against ``conn`` and return the rows as a DataFrame."""
        sql, params = self.to_sql()
        logger.debug(f"Executing: {sql} with {len(params)} parameters")
        return pd.read_sql_query(sql, conn, params=params)


def read_by_keys(
    conn: sqlite3.Connection,
    table: str,
    key_column: str,
    keys: Sequence[str],
    columns: Optional[Sequence[str]] = None,
    year_range: Optional[Tuple[int, int]] = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> pd.DataFrame:
    """
    Read rows of ``table`` whose ``key_column`` is in ``keys``.

    Large key lists are split into chunks of ``chunk_size`` and the results
    concatenated.

    Args:
        conn: Open HYDAT connection
        table: HYDAT table name
        key_column: Column matched against ``keys``
        keys: Key values, usually station numbers
        columns: Columns to select (all columns if None)
        year_range: Optional inclusive (first, last) filter on the YEAR column
        chunk_size: Keys per query

    Returns:
        DataFrame of all matching rows, possibly empty
    """
    select_columns = list(columns) if columns else ["*"]
    keys = list(keys)

    def _chunk_query(chunk_keys: Sequence[str]) -> Query:
        query = Query().select(*select_columns).from_(table).where_in(key_column, chunk_keys)
        if year_range is not None:
            query.where_between("YEAR", year_range[0], year_range[1])
        return query

    if not keys:
        return _chunk_query([]).read(conn)

    num_chunks = math.ceil(len(keys) / chunk_size)
    if num_chunks == 1:
        return _chunk_query(keys).read(conn)

    logger.debug(f"Reading {len(keys)} keys from {table} in {num_chunks} chunks of {chunk_size}")
    frames = [
        _chunk_query(keys[i : (i + chunk_size)]).read(conn)
        for i in range(0, len(keys), chunk_size)
    ]
    return pd.concat(frames, ignore_index=True)
