import logging
import os
import sqlite3
from contextlib import closing, contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Optional

from core.errors import QueryError, SchemaError, StoreConnectionError, StoreIOError
from db import bridge

log = logging.getLogger(__name__)

Record = Dict[str, Any]


def _details(e: BaseException, sql: Optional[str] = None) -> Dict[str, Any]:
    d: Dict[str, Any] = {"engine": type(e).__name__}
    if sql is not None:
        d["sql"] = sql
    return d


class StatementExecutor:
    """Runs one statement per call against a SQLite file.

    Every call opens its own connection and closes it before returning; the
    engine's file locking is the only coordination between callers.
    """

    def __init__(self, db_path: str, schema_sql: Optional[str] = None, timeout: float = 5.0):
        self.db_path = db_path
        self.schema_sql = schema_sql
        self.timeout = timeout

    def _ensure_dir(self):
        d = os.path.dirname(self.db_path)
        if not d:
            return
        try:
            os.makedirs(d, exist_ok=True)
        except OSError as e:
            raise StoreIOError(str(e), {"path": d, "engine": type(e).__name__}) from e

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            # isolation_level=None: autocommit, 문장 단위로 엔진이 커밋
            conn = sqlite3.connect(self.db_path, timeout=self.timeout, isolation_level=None)
        except sqlite3.Error as e:
            raise StoreConnectionError(str(e), {"path": self.db_path, "engine": type(e).__name__}) from e
        with closing(conn):
            yield conn

    def initialize(self) -> None:
        self._ensure_dir()
        with self._connect() as c:
            if not self.schema_sql:
                return
            try:
                c.executescript(self.schema_sql)
            except sqlite3.Error as e:
                raise SchemaError(str(e), _details(e)) from e
        log.info("store initialized at %s", self.db_path)

    def run_query(self, sql: str, params: Optional[Iterable[Any]] = None) -> List[Record]:
        bound = tuple(bridge.bind(p) for p in (params or ()))
        log.debug("query %r with %d params", sql, len(bound))
        with self._connect() as c:
            try:
                cur = c.execute(sql, bound)
                names = [d[0] for d in (cur.description or ())]
                rows = [
                    {name: bridge.read(raw) for name, raw in zip(names, row)}
                    for row in cur.fetchall()
                ]
            except (sqlite3.Error, sqlite3.Warning, UnicodeEncodeError) as e:
                raise QueryError(str(e), _details(e, sql)) from e
        return rows

    def run_command(self, sql: str, params: Optional[Iterable[Any]] = None) -> None:
        bound = tuple(bridge.bind(p) for p in (params or ()))
        log.debug("command %r with %d params", sql, len(bound))
        with self._connect() as c:
            try:
                c.execute(sql, bound)
            except (sqlite3.Error, sqlite3.Warning, UnicodeEncodeError) as e:
                raise QueryError(str(e), _details(e, sql)) from e
