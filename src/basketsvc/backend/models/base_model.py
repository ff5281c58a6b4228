# Copyright (c) 2023, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

import decimal
from typing import Annotated, Any, Optional, TypeVar

from sqlalchemy.engine import Dialect
from sqlalchemy.orm import DeclarativeBase, MappedAsDataclass, mapped_column
from sqlalchemy.types import BigInteger, TypeDecorator


class ScaledDecimal(TypeDecorator[decimal.Decimal]):
    # Stores Decimals as integers scaled by 10 ** scale, so that the column has
    # the same exact representation on every database engine.
    impl = BigInteger
    cache_ok = True

    def __init__(self, scale: int) -> None:
        # 'scale' is the number of digits to the right of the decimal point.
        TypeDecorator.__init__(self)
        self.scale = scale
        self.multiplier_int = 10**self.scale
        self.quantum = decimal.Decimal(1).scaleb(-self.scale)

    def process_bind_param(self, value: Optional[Any], dialect: Dialect) -> Optional[int]:
        # e.g. with scale=2, Decimal('12.34') is stored as 1234
        if value is None:
            return None
        rounded = decimal.Decimal(value).quantize(
            self.quantum, rounding=decimal.ROUND_HALF_UP
        )
        return int(rounded * self.multiplier_int)

    def process_result_value(
        self, value: Optional[Any], dialect: Dialect
    ) -> Optional[decimal.Decimal]:
        # e.g. with scale=2, 1234 is read back as Decimal('12.34')
        if value is None:
            return None
        return (decimal.Decimal(value) / self.multiplier_int).quantize(self.quantum)


class BaseModel(MappedAsDataclass, DeclarativeBase):
    type_annotation_map = {decimal.Decimal: ScaledDecimal(scale=2)}


ModelType = TypeVar("ModelType", bound=BaseModel)


intpk = Annotated[int, mapped_column(primary_key=True)]
