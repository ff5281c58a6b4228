# Copyright (c) 2023, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""Storage backends.

A storage backend knows how to build the SQLAlchemy engine of one database
engine. The schema itself is engine-agnostic: the backend is selected by the
'db_backend' setting.
"""

import abc
import logging
import sqlite3 as sqlite
from typing import TYPE_CHECKING, Any

import sqlalchemy as sa
from sqlalchemy.engine import URL
from sqlalchemy.event import listen
from sqlalchemy.pool import StaticPool

if TYPE_CHECKING:  # pragma: no cover
    from basketsvc.settings import BasketSettings

__all__ = [
    "StorageBackend",
    "SqliteBackend",
    "PostgresBackend",
    "UnknownBackendError",
    "get_backend",
]

logger = logging.getLogger(__name__)

MEMORY_DB = ":memory:"


class UnknownBackendError(ValueError):
    """Raised when the configured storage backend is not supported."""


def _set_sqlite_pragma(dbapi_connection, _connection_record):  # type: ignore
    if isinstance(dbapi_connection, sqlite.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


class StorageBackend(abc.ABC):
    name: str

    @abc.abstractmethod
    def url(self) -> URL:
        """Returns the SQLAlchemy URL of the database."""

    def engine_options(self) -> dict[str, Any]:
        return {}

    def create_engine(self, *, echo: bool = False) -> sa.Engine:
        url = self.url()
        logger.info(
            "Connecting to %s database %s",
            self.name,
            url.render_as_string(hide_password=True),
        )
        return sa.create_engine(url, echo=echo, **self.engine_options())


class SqliteBackend(StorageBackend):
    name = "sqlite"

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path

    def url(self) -> URL:
        return URL.create("sqlite+pysqlite", database=self.db_path)

    def engine_options(self) -> dict[str, Any]:
        if self.db_path in ("", MEMORY_DB):
            # One shared connection, so that every request thread sees the
            # same in-memory database.
            return {
                "connect_args": {"check_same_thread": False},
                "poolclass": StaticPool,
            }
        return {}

    def create_engine(self, *, echo: bool = False) -> sa.Engine:
        engine = super().create_engine(echo=echo)
        listen(engine, "connect", _set_sqlite_pragma)
        return engine


class PostgresBackend(StorageBackend):
    name = "postgresql"

    def __init__(
        self, *, host: str, port: int, database: str, user: str, password: str
    ) -> None:
        self.host = host
        self.port = port
        self.database = database
        self.user = user
        self.password = password

    def url(self) -> URL:
        return URL.create(
            "postgresql+psycopg2",
            username=self.user,
            password=self.password or None,
            host=self.host,
            port=self.port,
            database=self.database,
        )

    def engine_options(self) -> dict[str, Any]:
        return {"pool_pre_ping": True}


def get_backend(settings: "BasketSettings") -> StorageBackend:
    backend = str(settings.db_backend).lower()
    if backend == SqliteBackend.name:
        return SqliteBackend(str(settings.db_path))
    if backend in (PostgresBackend.name, "postgres"):
        return PostgresBackend(
            host=settings.db_host,
            port=settings.db_port,
            database=settings.db_name,
            user=settings.db_user,
            password=settings.db_password,
        )
    raise UnknownBackendError(f"Unsupported storage backend: {settings.db_backend}")
