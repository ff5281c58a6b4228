# Copyright (c) 2023, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

import logging
from decimal import Decimal
from typing import TYPE_CHECKING, TypedDict

import sqlalchemy as sa
from sqlalchemy.orm import Session

from basketsvc.backend import models

from .backends import get_backend

if TYPE_CHECKING:  # pragma: no cover
    from basketsvc.settings import BasketSettings

logger = logging.getLogger(__name__)


class SeedItem(TypedDict):
    buyer_id: str
    product_id: int
    name: str
    cost: Decimal
    quantity: int


SEED_BUYER_ID = "test-id-plz-ignore"

SEED_ITEMS: list[SeedItem] = [
    {
        "buyer_id": SEED_BUYER_ID,
        "product_id": 1,
        "name": "Premium Jelly Beans",
        "cost": Decimal("0.80"),
        "quantity": 5,
    },
    {
        "buyer_id": SEED_BUYER_ID,
        "product_id": 2,
        "name": "Netlogo Supercomputer",
        "cost": Decimal("2005.99"),
        "quantity": 1,
    },
]


def _create_tables(engine: sa.Engine) -> None:
    models.BaseModel.metadata.create_all(bind=engine)


def _drop_tables(engine: sa.Engine) -> None:
    models.BaseModel.metadata.drop_all(bind=engine)


def init_db_data(session: Session) -> None:
    if session.scalars(sa.select(models.BasketItem)).first() is None:
        # Empty basket table: add the development items.
        session.add_all(models.BasketItem(**item) for item in SEED_ITEMS)
    session.commit()


def init_database(engine: sa.Engine, *, reset: bool = False) -> None:
    """Bootstrap the database schema.

    Without reset, only creates the missing tables and never touches the data.
    With reset (development mode), drops every table, recreates them and
    seeds the development basket.
    """
    if reset:
        logger.warning("Resetting the basket database (development mode)")
        _drop_tables(engine)
    _create_tables(engine)
    if reset:
        session = session_factory(bind=engine)
        try:
            init_db_data(session)
        finally:
            session.close()
        logger.info("Development basket seeded for %s", SEED_BUYER_ID)


def configure_session(settings: "BasketSettings") -> sa.Engine:
    engine = get_backend(settings).create_engine()
    session_factory.configure(bind=engine)
    return engine


session_factory = sa.orm.sessionmaker()
