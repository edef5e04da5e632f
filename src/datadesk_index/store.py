from __future__ import annotations
from collections.abc import Sequence
from pathlib import Path
from types import TracebackType
import duckdb
from .config import PROJECTS_TABLE
from .errors import StorageWriteError
from .github import ProjectRecord
from .util import as_naive_utc, log

COLUMNS = [
    ("name", "VARCHAR"),
    ("description", "VARCHAR"),
    ("url", "VARCHAR"),
    ("repo_url", "VARCHAR"),
    ("created_at", "TIMESTAMP"),
]


def quote_identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


class ProjectStore:
    """
    A handle on the DuckDB file holding the projects table.  The file (and
    its parent directory) is created on first use.  Use as a context manager
    so that the connection is closed, and the file flushed, on exit.
    """

    def __init__(self, path: str | Path, table: str = PROJECTS_TABLE) -> None:
        self.path = Path(path)
        self.table = table
        self.table_sql = quote_identifier(table)
        self.conn: duckdb.DuckDBPyConnection | None = None

    def __enter__(self) -> ProjectStore:
        self.open()
        return self

    def __exit__(
        self,
        _exc_type: type[BaseException] | None,
        _exc_val: BaseException | None,
        _exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def open(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.conn = duckdb.connect(str(self.path))
        except (OSError, duckdb.Error) as e:
            raise StorageWriteError(f"Could not open database {self.path}: {e}") from e

    def close(self) -> None:
        if self.conn is not None:
            try:
                self.conn.close()
            except duckdb.Error as e:
                raise StorageWriteError(
                    f"Could not close database {self.path}: {e}"
                ) from e
            finally:
                self.conn = None

    @property
    def connection(self) -> duckdb.DuckDBPyConnection:
        if self.conn is None:
            raise StorageWriteError(f"Database {self.path} is not open")
        return self.conn

    def replace_projects(self, records: Sequence[ProjectRecord]) -> None:
        """
        Replace the contents of the projects table with exactly ``records``.
        The table is recreated and loaded inside a single transaction, so a
        reader sees either the previous table or the new one, never a
        partially loaded one.  An empty ``records`` leaves an empty table.
        """
        conn = self.connection
        try:
            conn.begin()
            self._create_table(conn)
            self._load_rows(conn, records)
            conn.commit()
        except duckdb.Error as e:
            self._rollback(conn)
            raise StorageWriteError(
                f"Could not write {self.table} table to {self.path}: {e}"
            ) from e
        log.info("Wrote %d rows to %s table in %s", len(records), self.table, self.path)

    def fetch_projects(self) -> list[ProjectRecord]:
        conn = self.connection
        names = ", ".join(name for name, _ in COLUMNS)
        try:
            rows = conn.execute(
                f"SELECT {names} FROM {self.table_sql} ORDER BY name"
            ).fetchall()
        except duckdb.Error as e:
            raise StorageWriteError(
                f"Could not read {self.table} table from {self.path}: {e}"
            ) from e
        return [
            ProjectRecord.model_validate(dict(zip((n for n, _ in COLUMNS), r)))
            for r in rows
        ]

    def _create_table(self, conn: duckdb.DuckDBPyConnection) -> None:
        schema = ", ".join(f"{name} {sqltype}" for name, sqltype in COLUMNS)
        conn.execute(f"CREATE OR REPLACE TABLE {self.table_sql} ({schema})")

    def _load_rows(
        self, conn: duckdb.DuckDBPyConnection, records: Sequence[ProjectRecord]
    ) -> None:
        if not records:
            return
        placeholders = ", ".join("?" for _ in COLUMNS)
        conn.executemany(
            f"INSERT INTO {self.table_sql} VALUES ({placeholders})",
            [
                [r.name, r.description, r.url, r.repo_url, as_naive_utc(r.created_at)]
                for r in records
            ],
        )

    def _rollback(self, conn: duckdb.DuckDBPyConnection) -> None:
        try:
            conn.rollback()
        except duckdb.Error as e:
            # No transaction was active, e.g. if BEGIN itself failed
            log.debug("Rollback of %s failed: %s", self.path, e)


def write_projects(records: Sequence[ProjectRecord], path: str | Path) -> None:
    """Replace the projects table in the database at ``path`` with ``records``"""
    with ProjectStore(path) as store:
        store.replace_projects(records)
