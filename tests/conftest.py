# Copyright (c) 2023, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

# Cf. https://gist.github.com/kissgyorgy/e2365f25a213de44b9a2

import sys
from decimal import Decimal
from sqlite3 import Connection as SQLite3Connection
from typing import cast

import pytest
import sqlalchemy as sa
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.event import listen
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from basketsvc.backend import crud, models
from basketsvc.backend.db import SqliteBackend, session_factory
from basketsvc.backend.models.base_model import BaseModel
from basketsvc.settings import BasketSettings
from basketsvc.web import AuthenticationError, Identity, TokenVerifier, create_app

VALID_TOKEN = "valid-token"
AUTH_HEADERS = {"Authorization": f"Bearer {VALID_TOKEN}"}

BASKET_ROWS = [
    # buyer, product, name, cost, quantity
    ("alice", 1, "Premium Jelly Beans", "0.80", 5),
    ("alice", 2, "Netlogo Supercomputer", "2005.99", 1),
    ("alice", 3, "Tea", "3.50", 2),
    ("bob", 1, "Premium Jelly Beans", "0.80", 1),
]


def _set_sqlite_pragma(dbapi_connection, _connection_record):
    if isinstance(dbapi_connection, SQLite3Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# https://docs.sqlalchemy.org/en/20/dialects/sqlite.html#pysqlite-serializable
def do_connect(dbapi_connection, connection_record):
    # disable pysqlite's emitting of the BEGIN statement entirely.
    # also stops it from emitting COMMIT before any DDL.
    dbapi_connection.isolation_level = None


def do_begin(conn):
    # emit our own BEGIN
    conn.exec_driver_sql("BEGIN")


def make_items(rows=BASKET_ROWS) -> list[models.BasketItem]:
    return [
        models.BasketItem(
            buyer_id=buyer_id,
            product_id=product_id,
            name=name,
            cost=Decimal(cost),
            quantity=quantity,
        )
        for buyer_id, product_id, name, cost, quantity in rows
    ]


@pytest.fixture(scope="session")
def engine():
    engine = create_engine("sqlite+pysqlite:///:memory:")
    listen(engine, "connect", _set_sqlite_pragma)
    listen(engine, "connect", do_connect)
    listen(engine, "begin", do_begin)
    return engine


@pytest.fixture(scope="session")
def tables(engine):
    BaseModel.metadata.create_all(engine)
    yield
    BaseModel.metadata.drop_all(engine)


@pytest.fixture
def dbsession(engine, tables):
    """Returns a sqlalchemy session, and after the test tears down everything properly."""
    connection = engine.connect()
    # begin the nested transaction
    transaction = connection.begin()
    # use the connection with the already started transaction
    factory = sessionmaker(bind=connection, join_transaction_mode="create_savepoint")
    session = factory()

    yield session

    session.close()
    # roll back the broader transaction
    transaction.rollback()
    # put back the connection to the connection pool
    connection.close()


@pytest.fixture
def init_items(dbsession: Session) -> list[models.BasketItem]:
    dbsession.add_all(make_items())
    dbsession.commit()

    items = cast(
        list[models.BasketItem],
        dbsession.scalars(sa.select(models.BasketItem).order_by(models.BasketItem.id)).all(),
    )
    return items


#
# Mock some methods of the sqlalchemy 'Session'
#
@pytest.fixture()
def mock_commit(monkeypatch):
    state = {"failed": False}
    called = []

    def _commit(_):
        called.append(True)
        if state["failed"]:
            raise SQLAlchemyError("Commit failed")

    monkeypatch.setattr("basketsvc.backend.crud.base.Session.commit", _commit)

    return state, called


@pytest.fixture()
def mock_select(monkeypatch):
    state = {"failed": False}
    called = []

    def _select(*_args):
        called.append(True)
        if state["failed"]:
            raise SQLAlchemyError("Select failed")

    monkeypatch.setattr("basketsvc.backend.crud.base.select", _select)
    monkeypatch.setattr(sys.modules["basketsvc.backend.crud.basket_item"], "select", _select)

    return state, called


#
# A database bound to the module-level session factory used by the commands
#
@pytest.fixture
def command_db():
    engine = SqliteBackend(":memory:").create_engine()
    BaseModel.metadata.create_all(engine)
    session_factory.configure(bind=engine)

    yield engine

    BaseModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def init_basket(command_db) -> list[tuple]:
    with session_factory() as session:
        session.add_all(make_items())
        session.commit()
    return BASKET_ROWS


#
# Mock the CRUD methods used by the basket commands
#
@pytest.fixture()
def mock_crud_error(monkeypatch):
    state = {"raises": set()}
    methods_called = []

    def _patch(name):
        original = getattr(crud.basket_item, name)

        def _method(*args, **kwargs):
            methods_called.append(name)
            if name in state["raises"]:
                raise crud.CrudError("Database is gone")
            return original(*args, **kwargs)

        monkeypatch.setattr(crud.basket_item, name, _method)

    for name in (
        "get_all",
        "has_items",
        "get_by_buyer",
        "get_by_key",
        "add_or_merge",
        "set_quantity",
        "delete",
    ):
        _patch(name)

    return state, methods_called


#
# Web application with a fake identity provider
#
class FakeTokenVerifier(TokenVerifier):
    def __init__(self) -> None:
        self.tokens: list[str] = []

    def verify(self, token: str) -> Identity:
        self.tokens.append(token)
        if token != VALID_TOKEN:
            raise AuthenticationError("Unknown token")
        return Identity(subject="order-service", claims={"sub": "order-service"})


@pytest.fixture
def settings(tmp_path) -> BasketSettings:
    settings = BasketSettings(tmp_path / "settings")
    settings.db_backend = "sqlite"
    settings.db_path = str(tmp_path / "basket.db")
    settings.dev_mode = True
    return settings


@pytest.fixture
def token_verifier() -> FakeTokenVerifier:
    return FakeTokenVerifier()


@pytest.fixture
def client(settings, token_verifier):
    app = create_app(settings, token_verifier=token_verifier)
    with TestClient(app) as test_client:
        yield test_client
