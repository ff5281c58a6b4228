# Copyright (c) 2023, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""Basket HTTP routes.

The route shapes are kept from the legacy basket controller, e.g.
'add/userId=u1&productId=1&quantity=2&productName=Beans&cost=0.80'.
Registration order matters: the range route shall be tried before the item
route, and the item route before the buyer route.
"""

import logging
from decimal import Decimal
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Path, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from basketsvc.backend import schemas
from basketsvc.backend.api import CommandResponse, CommandStatus, basket

from .auth import Identity, require_identity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/Basket", tags=["basket"])

# JSON names of the BasketItem fields, those of the Baskets table columns.
WIRE_NAMES = {
    "id": "id",
    "buyer_id": "buyerId",
    "product_id": "productId",
    "name": "name",
    "cost": "cost",
    "quantity": "quantity",
}

# Path values are bound to the legacy storage types: 32-bit ids and
# quantities, decimal(18,2) costs.
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

Int32 = Annotated[int, Path(ge=INT32_MIN, le=INT32_MAX)]
Cost = Annotated[Decimal, Path(max_digits=18, decimal_places=2)]

HTTP_STATUS = {
    CommandStatus.COMPLETED: status.HTTP_200_OK,
    CommandStatus.REJECTED: status.HTTP_400_BAD_REQUEST,
    CommandStatus.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    CommandStatus.FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def to_wire(item: schemas.BasketItem) -> dict[str, Any]:
    return {WIRE_NAMES[key]: value for key, value in item.flatten().items()}


def reply(response: CommandResponse) -> JSONResponse:
    """Map a command response to an HTTP response."""
    if response.status is not CommandStatus.COMPLETED:
        raise HTTPException(
            status_code=HTTP_STATUS[response.status], detail=response.reason
        )

    body = response.body
    if isinstance(body, list):
        content = [to_wire(item) for item in body]
    else:
        content = to_wire(body)
    return JSONResponse(content=jsonable_encoder(content))


@router.get("/get/", name="Get all baskets")
def get_baskets(_identity: Identity = Depends(require_identity)) -> JSONResponse:
    return reply(basket.get_all())


@router.get(
    "/get/{userid}&range={start}-{end}",
    name="Get basket by buyer ID in range start-end",
)
def get_basket_range(
    userid: str,
    start: Int32,
    end: Int32,
    _identity: Identity = Depends(require_identity),
) -> JSONResponse:
    return reply(basket.get_basket_range(userid, start=start, end=end))


@router.get(
    "/get/{userid}&{productid}",
    name="Get basket item by buyer ID and productid",
)
def get_basket_item(
    userid: str,
    productid: Int32,
    _identity: Identity = Depends(require_identity),
) -> JSONResponse:
    return reply(basket.get_item(userid, product_id=productid))


@router.get("/get/{userid}", name="Get baskets by buyer ID")
def get_basket(
    userid: str, _identity: Identity = Depends(require_identity)
) -> JSONResponse:
    return reply(basket.get_basket(userid))


@router.post(
    "/add/userId={userId}&productId={productId}&quantity={quantity}"
    "&productName={name}&cost={cost}",
    name="Add an item to a customers basket",
)
def add_item_to_basket(
    userId: str,  # pylint: disable=invalid-name
    productId: Int32,  # pylint: disable=invalid-name
    quantity: Int32,
    name: str,
    cost: Cost,
    identity: Identity = Depends(require_identity),
) -> JSONResponse:
    logger.info(
        "%s adds %d x product %d to basket of %s", identity.subject, quantity, productId, userId
    )
    return reply(
        basket.add_item(
            userId, product_id=productId, quantity=quantity, name=name, cost=cost
        )
    )


@router.put(
    "/update/userId={userId}&productId={productId}&quantity={quantity}",
    name="Update an items quantity a customers basket",
)
def update_item_in_basket(
    userId: str,  # pylint: disable=invalid-name
    productId: Int32,  # pylint: disable=invalid-name
    quantity: Int32,
    identity: Identity = Depends(require_identity),
) -> JSONResponse:
    logger.info(
        "%s sets product %d quantity to %d in basket of %s",
        identity.subject,
        productId,
        quantity,
        userId,
    )
    return reply(basket.update_item(userId, product_id=productId, quantity=quantity))


@router.delete(
    "/delete/userId={userId}&productId={productId}",
    name="Delete a basket item",
)
def delete_basket_item(
    userId: str,  # pylint: disable=invalid-name
    productId: Int32,  # pylint: disable=invalid-name
    identity: Identity = Depends(require_identity),
) -> JSONResponse:
    logger.info(
        "%s removes product %d from basket of %s", identity.subject, productId, userId
    )
    return reply(basket.delete_item(userId, product_id=productId))
