# Copyright (c) 2023, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from .base import BaseSchema
from .basket_item import BasketItem, BasketItemCreate, BasketItemUpdate

__all__ = [
    "BaseSchema",
    "BasketItem",
    "BasketItemCreate",
    "BasketItemUpdate",
]
