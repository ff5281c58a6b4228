# Copyright (c) 2023, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from decimal import Decimal

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base_model import BaseModel, intpk


class BasketItem(BaseModel):
    # pylint: disable=too-few-public-methods
    __tablename__ = "Baskets"
    __table_args__ = (
        UniqueConstraint("buyerId", "productId", name="uq_baskets_buyer_product"),
    )

    id: Mapped[intpk] = mapped_column(init=False)
    buyer_id: Mapped[str] = mapped_column("buyerId", String(255), index=True)
    product_id: Mapped[int] = mapped_column("productId")
    # name and cost are a snapshot taken when the item is first added.
    name: Mapped[str] = mapped_column(String(255))
    cost: Mapped[Decimal]
    quantity: Mapped[int] = mapped_column(default=1)
