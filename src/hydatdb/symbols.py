"""
HYDAT data symbols and their translation.

The lookup mirrors the DATA_SYMBOLS table shipped in HYDAT and is bundled
here so translation does not need a database round trip.
"""

from typing import Dict, Tuple

import pandas as pd

from .exceptions import HydatValidationError

# SYMBOL_ID -> (SYMBOL_EN, SYMBOL_FR)
DATA_SYMBOLS: Dict[str, Tuple[str, str]] = {
    "A": ("Partial Day", "Journée incomplète"),
    "B": ("Ice Conditions", "Conditions à glace"),
    "D": ("Dry", "Sec"),
    "E": ("Estimated", "Estimé"),
    "R": ("Revised", "Révisé"),
}

SYMBOL_OUTPUT_CHOICES = ("code", "english", "french")

_LABEL_COLUMN = {"english": "SYMBOL_EN", "french": "SYMBOL_FR"}


def data_symbols() -> pd.DataFrame:
    """Return the symbol lookup as a DataFrame (SYMBOL_ID, SYMBOL_EN, SYMBOL_FR)."""
    return pd.DataFrame(
        [(code, en, fr) for code, (en, fr) in DATA_SYMBOLS.items()],
        columns=["SYMBOL_ID", "SYMBOL_EN", "SYMBOL_FR"],
    )


def validate_symbol_output(symbol_output: str) -> str:
    """Return ``symbol_output`` lower-cased, or raise if it is not a known choice."""
    normalized = str(symbol_output).strip().lower()
    if normalized not in SYMBOL_OUTPUT_CHOICES:
        raise HydatValidationError(
            f"Invalid symbol_output: {symbol_output!r}",
            f"choose one of {', '.join(SYMBOL_OUTPUT_CHOICES)}",
        )
    return normalized


def translate_symbols(
    df: pd.DataFrame, column: str = "Symbol", symbol_output: str = "code"
) -> pd.DataFrame:
    """
    Replace the symbol codes in ``column`` according to ``symbol_output``.

    Codes are left-joined against the lookup, so rows whose code is unknown
    or missing keep their row and get a null label.

    Args:
        df: Tidy frame with a column of symbol codes
        column: Name of that column
        symbol_output: ``code``, ``english`` or ``french``

    Returns:
        A new DataFrame; ``df`` is not modified
    """
    symbol_output = validate_symbol_output(symbol_output)
    if symbol_output == "code":
        return df.copy()

    label_column = _LABEL_COLUMN[symbol_output]
    lookup = data_symbols()[["SYMBOL_ID", label_column]]

    # an all-null code column comes back from SQLite as float; join on object keys
    keyed = df.assign(_symbol_key=df[column].astype(object))
    merged = keyed.merge(lookup, how="left", left_on="_symbol_key", right_on="SYMBOL_ID")
    merged[column] = merged[label_column]
    merged.index = df.index
    return merged[list(df.columns)]
