"""
Tests for HYDAT connection handling.
"""

import sqlite3

import pytest

from hydatdb.config import HydatConfig, set_config
from hydatdb.connection import (
    HydatHandle,
    HydatPath,
    as_connection_source,
    hydat_connection,
)
from hydatdb.exceptions import HydatConnectionError, HydatValidationError


class TestAsConnectionSource:
    def test_path_string(self, hydat_path):
        source = as_connection_source(str(hydat_path))
        assert isinstance(source, HydatPath)
        assert source.path == hydat_path

    def test_open_connection(self, hydat_conn):
        source = as_connection_source(hydat_conn)
        assert isinstance(source, HydatHandle)
        assert source.connection is hydat_conn

    def test_source_passes_through(self, hydat_path):
        source = HydatPath(hydat_path)
        assert as_connection_source(source) is source

    def test_none_uses_configured_path(self, hydat_path):
        set_config(HydatConfig(hydat_path=hydat_path))
        assert as_connection_source(None) == HydatPath(hydat_path)

    def test_invalid_type(self):
        with pytest.raises(HydatValidationError, match="hydat_path"):
            as_connection_source(42)


class TestHydatConnection:
    def test_path_connection_is_closed(self, hydat_path):
        with hydat_connection(hydat_path) as conn:
            assert conn.execute("SELECT COUNT(*) FROM STATIONS").fetchone()[0] == 5

        with pytest.raises(sqlite3.ProgrammingError):
            conn.execute("SELECT 1")

    def test_path_connection_is_read_only(self, hydat_path):
        with hydat_connection(hydat_path) as conn:
            with pytest.raises(sqlite3.OperationalError):
                conn.execute("CREATE TABLE scratch (x INTEGER)")

    def test_path_connection_closed_on_error(self, hydat_path):
        with pytest.raises(RuntimeError):
            with hydat_connection(hydat_path) as conn:
                raise RuntimeError("boom")

        with pytest.raises(sqlite3.ProgrammingError):
            conn.execute("SELECT 1")

    def test_caller_connection_stays_open(self, hydat_conn):
        with hydat_connection(hydat_conn) as conn:
            assert conn is hydat_conn

        assert hydat_conn.execute("SELECT 1").fetchone() == (1,)

    def test_caller_connection_stays_open_on_error(self, hydat_conn):
        with pytest.raises(RuntimeError):
            with hydat_connection(hydat_conn):
                raise RuntimeError("boom")

        assert hydat_conn.execute("SELECT 1").fetchone() == (1,)

    def test_missing_file(self, tmp_path):
        with pytest.raises(HydatConnectionError, match="No HYDAT database"):
            with hydat_connection(tmp_path / "nope.sqlite3"):
                pass

    def test_sqlite_file_without_stations(self, tmp_path):
        path = tmp_path / "other.sqlite3"
        conn = sqlite3.connect(path)
        conn.execute("CREATE TABLE SOMETHING_ELSE (x INTEGER)")
        conn.commit()
        conn.close()

        with pytest.raises(HydatConnectionError, match="STATIONS"):
            with hydat_connection(path):
                pass

    def test_not_a_database(self, tmp_path):
        path = tmp_path / "notes.sqlite3"
        path.write_text("this is not a database, just some text that is long enough " * 20)

        with pytest.raises(HydatConnectionError):
            with hydat_connection(path):
                pass
