# Copyright (c) 2023, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from .base import CRUDBase, CreateSchemaType, CrudError, CrudIntegrityError, UpdateSchemaType
from .basket_item import CRUDBasketItem, basket_item

__all__ = [
    "CRUDBase",
    "CreateSchemaType",
    "UpdateSchemaType",
    "CrudError",
    "CrudIntegrityError",
    "CRUDBasketItem",
    "basket_item",
]
