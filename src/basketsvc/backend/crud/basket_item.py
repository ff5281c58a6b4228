# Copyright (c) 2023, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

import logging
from typing import Optional, cast

from sqlalchemy import exists, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from basketsvc.backend import models, schemas

from .base import CRUDBase, CrudError, CrudIntegrityError

logger = logging.getLogger(__name__)

# Number of increments tried when a concurrent request inserts the same
# (buyer, product) pair between our increment and our insert.
MERGE_ATTEMPTS = 2


class CRUDBasketItem(
    CRUDBase[models.BasketItem, schemas.BasketItemCreate, schemas.BasketItemUpdate]
):
    def has_items(self, dbsession: Session, *, buyer_id: Optional[str] = None) -> bool:
        query = exists().select_from(models.BasketItem)
        if buyer_id is not None:
            query = query.where(models.BasketItem.buyer_id == buyer_id)
        try:
            found = bool(dbsession.scalar(select(query)))
        except SQLAlchemyError as exc:
            raise CrudError from exc
        else:
            return found

    def get_by_buyer(
        self,
        dbsession: Session,
        buyer_id: str,
        *,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> list[models.BasketItem]:
        try:
            items = cast(
                list[models.BasketItem],
                dbsession.scalars(
                    select(models.BasketItem)
                    .where(models.BasketItem.buyer_id == buyer_id)
                    .order_by(models.BasketItem.id)
                    .offset(skip)
                    .limit(limit)
                ).all(),
            )
        except SQLAlchemyError as exc:
            raise CrudError from exc
        else:
            return items

    def get_by_key(
        self, dbsession: Session, buyer_id: str, *, product_id: int
    ) -> list[models.BasketItem]:
        try:
            items = cast(
                list[models.BasketItem],
                dbsession.scalars(
                    select(models.BasketItem)
                    .where(models.BasketItem.buyer_id == buyer_id)
                    .where(models.BasketItem.product_id == product_id)
                    .order_by(models.BasketItem.id)
                ).all(),
            )
        except SQLAlchemyError as exc:
            raise CrudError from exc
        else:
            return items

    def add_or_merge(
        self, dbsession: Session, *, obj_in: schemas.BasketItemCreate
    ) -> models.BasketItem:
        for attempt in range(1, MERGE_ATTEMPTS + 1):
            item_ = self._increment(dbsession, obj_in)
            if item_ is not None:
                return item_

            # No item found: create it
            try:
                return self.create(dbsession, obj_in=obj_in)
            except CrudIntegrityError:
                logger.info(
                    "Item (%s, %s) inserted concurrently, merging (attempt %d)",
                    obj_in.buyer_id,
                    obj_in.product_id,
                    attempt,
                )
        raise CrudError(
            f"Cannot merge item ({obj_in.buyer_id}, {obj_in.product_id})"
        )

    def _increment(
        self, dbsession: Session, obj_in: schemas.BasketItemCreate
    ) -> Optional[models.BasketItem]:
        # A single UPDATE statement: the read-modify-write happens in the
        # database, under the row lock.
        try:
            result = dbsession.execute(
                update(models.BasketItem)
                .where(models.BasketItem.buyer_id == obj_in.buyer_id)
                .where(models.BasketItem.product_id == obj_in.product_id)
                .values(quantity=models.BasketItem.quantity + obj_in.quantity)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:  # type: ignore[attr-defined]
                return None
            item_ = dbsession.scalars(
                select(models.BasketItem)
                .where(models.BasketItem.buyer_id == obj_in.buyer_id)
                .where(models.BasketItem.product_id == obj_in.product_id)
                .execution_options(populate_existing=True)
            ).one()
            dbsession.commit()
        except SQLAlchemyError as exc:
            dbsession.rollback()
            raise CrudError() from exc
        else:
            dbsession.refresh(item_)
            return item_

    def set_quantity(
        self, dbsession: Session, *, db_obj: models.BasketItem, quantity: int
    ) -> models.BasketItem:
        return self.update(
            dbsession,
            db_obj=db_obj,
            obj_in=schemas.BasketItemUpdate(quantity=quantity),
        )


basket_item = CRUDBasketItem(models.BasketItem)
