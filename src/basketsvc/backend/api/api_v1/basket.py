# Copyright (c) 2023, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Type

from basketsvc.backend import crud, schemas
from basketsvc.backend.api.command import CommandResponse, CommandStatus, command

from .base import CommandModel

logger = logging.getLogger(__name__)


@dataclass
class BasketModel(CommandModel[crud.CRUDBasketItem, schemas.BasketItem]):
    crud_object: crud.CRUDBasketItem = crud.basket_item
    schema: Type[schemas.BasketItem] = schemas.BasketItem

    @command
    def get_basket(self, buyer_id: str) -> CommandResponse:
        try:
            items = self.crud_object.get_by_buyer(self.session, buyer_id)
        except crud.CrudError as exc:
            return self.failed("GET-BASKET - SQL or database error", exc)

        if not items:
            return CommandResponse(
                CommandStatus.NOT_FOUND,
                "No baskets found",
            )

        body = [self.schema.from_orm(item_) for item_ in items]
        return CommandResponse(CommandStatus.COMPLETED, body=body)

    @command
    def get_basket_range(self, buyer_id: str, *, start: int, end: int) -> CommandResponse:
        if start < 0 or start >= end:
            return CommandResponse(
                CommandStatus.REJECTED,
                f"GET-RANGE - Invalid range {start}-{end}: "
                f"expecting 0 <= start < end.",
            )

        try:
            if not self.crud_object.has_items(self.session, buyer_id=buyer_id):
                return CommandResponse(CommandStatus.NOT_FOUND, "No baskets found")
            items = self.crud_object.get_by_buyer(
                self.session, buyer_id, skip=start, limit=end - start
            )
        except crud.CrudError as exc:
            return self.failed("GET-RANGE - SQL or database error", exc)

        body = [self.schema.from_orm(item_) for item_ in items]
        return CommandResponse(CommandStatus.COMPLETED, body=body)

    @command
    def get_item(self, buyer_id: str, *, product_id: int) -> CommandResponse:
        try:
            items = self.crud_object.get_by_key(
                self.session, buyer_id, product_id=product_id
            )
        except crud.CrudError as exc:
            return self.failed("GET-ITEM - SQL or database error", exc)

        if not items:
            return CommandResponse(
                CommandStatus.NOT_FOUND,
                f"GET-ITEM - Product {product_id} not found "
                f"in basket of {buyer_id}.",
            )

        body = [self.schema.from_orm(item_) for item_ in items]
        return CommandResponse(CommandStatus.COMPLETED, body=body)

    @command
    def add_item(
        self,
        buyer_id: str,
        *,
        product_id: int,
        quantity: int,
        name: str,
        cost: Decimal,
    ) -> CommandResponse:
        if quantity <= 0:
            return CommandResponse(
                CommandStatus.REJECTED,
                f"ADD - Quantity shall be positive, got {quantity}.",
            )

        obj_in = schemas.BasketItemCreate(
            buyer_id=buyer_id,
            product_id=product_id,
            name=name,
            cost=cost,
            quantity=quantity,
        )
        try:
            item_ = self.crud_object.add_or_merge(self.session, obj_in=obj_in)
        except crud.CrudError as exc:
            return self.failed("ADD - Cannot add item", exc)

        logger.debug(
            "Product %s of %s: quantity is now %s", product_id, buyer_id, item_.quantity
        )
        body = self.schema.from_orm(item_)
        return CommandResponse(CommandStatus.COMPLETED, body=body)

    @command
    def update_item(
        self, buyer_id: str, *, product_id: int, quantity: int
    ) -> CommandResponse:
        try:
            items = self.crud_object.get_by_key(
                self.session, buyer_id, product_id=product_id
            )
        except crud.CrudError as exc:
            return self.failed("UPDATE - SQL or database error", exc)

        if not items:
            return CommandResponse(
                CommandStatus.NOT_FOUND,
                "No item found with those arguments",
            )

        if quantity == 0:
            return CommandResponse(
                CommandStatus.REJECTED,
                "Quantity is 0. Please use the delete method for this.",
            )
        if quantity < 0:
            return CommandResponse(
                CommandStatus.REJECTED,
                f"UPDATE - Quantity shall be positive, got {quantity}.",
            )

        try:
            item_ = self.crud_object.set_quantity(
                self.session, db_obj=items[0], quantity=quantity
            )
        except crud.CrudError as exc:
            return self.failed("UPDATE - Cannot update item", exc)

        body = self.schema.from_orm(item_)
        return CommandResponse(CommandStatus.COMPLETED, body=body)

    @command
    def delete_item(self, buyer_id: str, *, product_id: int) -> CommandResponse:
        try:
            items = self.crud_object.get_by_key(
                self.session, buyer_id, product_id=product_id
            )
        except crud.CrudError as exc:
            return self.failed("DELETE - SQL or database error", exc)

        if not items:
            return CommandResponse(
                CommandStatus.NOT_FOUND,
                "No basket items found with those arguments",
            )

        # Echo the item back: build the body before the row is gone.
        item_ = items[0]
        body = self.schema.from_orm(item_)
        try:
            self.crud_object.delete(self.session, db_obj=item_)
        except crud.CrudError as exc:
            return self.failed("DELETE - Cannot delete item", exc)

        return CommandResponse(CommandStatus.COMPLETED, body=body)


basket = BasketModel()
