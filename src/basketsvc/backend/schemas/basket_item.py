# Copyright (c) 2023, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from dataclasses import dataclass
from decimal import Decimal

from basketsvc.backend import models

from .base import BaseSchema


@dataclass
class _BasketItemBase(BaseSchema[models.BasketItem]):
    buyer_id: str
    product_id: int


@dataclass
class BasketItemCreate(_BasketItemBase):
    name: str
    cost: Decimal
    quantity: int = 1


@dataclass
class BasketItemUpdate(BaseSchema[models.BasketItem]):
    quantity: int


@dataclass
class _BasketItemInDBBase(_BasketItemBase):
    id: int


# Additional properties to return from DB
@dataclass
class BasketItem(_BasketItemInDBBase):
    name: str
    cost: Decimal
    quantity: int

    @classmethod
    def from_orm(cls, orm_obj: models.BasketItem) -> "BasketItem":
        return cls(
            id=orm_obj.id,
            buyer_id=orm_obj.buyer_id,
            product_id=orm_obj.product_id,
            name=orm_obj.name,
            cost=orm_obj.cost,
            quantity=orm_obj.quantity,
        )
