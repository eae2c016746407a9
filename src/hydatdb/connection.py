"""
Connection handling for the HYDAT SQLite database.

A HYDAT source is either a path to the database file, which is opened
read-only and closed again when the query finishes, or an already open
``sqlite3.Connection`` that belongs to the caller and is left open.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Union

from .config import get_config
from .exceptions import HydatConnectionError, HydatValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HydatPath:
    """A HYDAT file on disk. Connections opened from it are owned by hydatdb."""

    path: Path

    def open(self) -> sqlite3.Connection:
        """Open the file read-only and check that it looks like HYDAT."""
        path = Path(self.path).expanduser()
        if not path.is_file():
            raise HydatConnectionError(
                f"No HYDAT database found at {path}",
                "download Hydat.sqlite3 from the Water Survey of Canada and pass its location as hydat_path",
            )

        conn = sqlite3.connect(f"{path.resolve().as_uri()}?mode=ro", uri=True)
        try:
            found = conn.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table' AND name = 'STATIONS'"
            ).fetchone()
        except sqlite3.DatabaseError as e:
            conn.close()
            raise HydatConnectionError(f"{path} is not a SQLite database: {e}") from e

        if found is None:
            conn.close()
            raise HydatConnectionError(
                f"{path} is not a HYDAT database: STATIONS table is missing"
            )

        logger.debug(f"Opened HYDAT database {path}")
        return conn


@dataclass(frozen=True)
class HydatHandle:
    """A connection opened by the caller. hydatdb never closes it."""

    connection: sqlite3.Connection


ConnectionSource = Union[HydatPath, HydatHandle]

HydatPathLike = Union[str, "os.PathLike[str]", sqlite3.Connection, HydatPath, HydatHandle]


def as_connection_source(hydat_path: Optional[HydatPathLike] = None) -> ConnectionSource:
    """
    Normalize the ``hydat_path`` argument accepted by the query functions.

    Args:
        hydat_path: Path to a HYDAT file, an open ``sqlite3.Connection``, a
            ``ConnectionSource``, or None for the configured default path.

    Returns:
        A HydatPath or HydatHandle.
    """
    if hydat_path is None:
        return HydatPath(get_config().hydat_path)
    if isinstance(hydat_path, (HydatPath, HydatHandle)):
        return hydat_path
    if isinstance(hydat_path, sqlite3.Connection):
        return HydatHandle(hydat_path)
    if isinstance(hydat_path, (str, os.PathLike)):
        return HydatPath(Path(hydat_path))
    raise HydatValidationError(
        f"hydat_path must be a path or an open sqlite3.Connection, got {type(hydat_path).__name__}"
    )


@contextmanager
def hydat_connection(
    hydat_path: Optional[HydatPathLike] = None,
) -> Iterator[sqlite3.Connection]:
    """
    Yield a connection to HYDAT for the duration of one query.

    Connections opened from a path are closed on exit, including when the
    body raises. Caller-supplied connections are yielded as-is.
    """
    source = as_connection_source(hydat_path)

    if isinstance(source, HydatHandle):
        yield source.connection
        return

    conn = source.open()
    try:
        yield conn
    finally:
        conn.close()
        logger.debug(f"Closed HYDAT database {source.path}")
