"""
Column layout of the wide daily HYDAT tables.

Each daily table stores one row per station, year and month, with one
column per day of the month (``FLOW1`` .. ``FLOW31``) and, for most
tables, a parallel flag column per day (``FLOW_SYMBOL1`` ..
``FLOW_SYMBOL31``). The column names are enumerated here once instead of
being discovered by pattern matching at query time.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

DAYS_IN_LONGEST_MONTH = 31

ID_COLUMNS = ["STATION_NUMBER", "YEAR", "MONTH", "NO_DAYS"]


@dataclass(frozen=True)
class WideTable:
    """A wide daily HYDAT table and how to label it in tidy output."""

    table: str
    value_field: str
    parameter: str
    symbol_field: Optional[str] = None
    description: str = ""

    @property
    def has_symbols(self) -> bool:
        return self.symbol_field is not None

    @property
    def value_columns(self) -> List[str]:
        """``<value_field>1`` .. ``<value_field>31``."""
        return [f"{self.value_field}{day}" for day in range(1, DAYS_IN_LONGEST_MONTH + 1)]

    @property
    def symbol_columns(self) -> List[str]:
        if self.symbol_field is None:
            return []
        return [f"{self.symbol_field}{day}" for day in range(1, DAYS_IN_LONGEST_MONTH + 1)]

    @property
    def day_columns(self) -> List[str]:
        """All day-indexed columns, values first."""
        return self.value_columns + self.symbol_columns

    @property
    def columns(self) -> List[str]:
        """Every column selected from the table."""
        return ID_COLUMNS + self.day_columns

    @property
    def output_columns(self) -> List[str]:
        """Column names of the tidy frame built from this table."""
        base = ["STATION_NUMBER", "Date", "Parameter", "Value"]
        if self.has_symbols:
            base.append("Symbol")
        return base

    def field_kinds(self) -> Dict[str, str]:
        """Map a column-name prefix to ``value`` or ``symbol``."""
        kinds = {self.value_field: "value"}
        if self.symbol_field is not None:
            kinds[self.symbol_field] = "symbol"
        return kinds

    def __repr__(self) -> str:
        return f"WideTable(table={self.table}, parameter={self.parameter})"


DLY_FLOWS = WideTable(
    table="DLY_FLOWS",
    value_field="FLOW",
    symbol_field="FLOW_SYMBOL",
    parameter="Flow",
    description="Daily mean discharge (m^3/s)",
)

DLY_LEVELS = WideTable(
    table="DLY_LEVELS",
    value_field="LEVEL",
    symbol_field="LEVEL_SYMBOL",
    parameter="Level",
    description="Daily mean water level (m)",
)

SED_DLY_LOADS = WideTable(
    table="SED_DLY_LOADS",
    value_field="LOAD",
    parameter="Load",
    description="Daily suspended sediment load (tonnes)",
)

SED_DLY_SUSCON = WideTable(
    table="SED_DLY_SUSCON",
    value_field="SUSCON",
    symbol_field="SUSCON_SYMBOL",
    parameter="Suscon",
    description="Daily suspended sediment concentration (mg/L)",
)

WIDE_TABLES: Dict[str, WideTable] = {
    "flows": DLY_FLOWS,
    "levels": DLY_LEVELS,
    "sed_loads": SED_DLY_LOADS,
    "sed_suscon": SED_DLY_SUSCON,
}
