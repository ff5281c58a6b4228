# Copyright (c) 2023, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from .base_model import BaseModel, ModelType
from .basket_item import BasketItem

__all__ = [
    "ModelType",
    "BaseModel",
    "BasketItem",
]
