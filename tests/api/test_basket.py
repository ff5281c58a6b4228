# Copyright (c) 2023, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from decimal import Decimal

import pytest

from basketsvc.backend import schemas
from basketsvc.backend.api import CommandStatus, basket

pytestmark = pytest.mark.api


def _add(buyer_id="u1", product_id=1, quantity=5, name="Beans", cost="0.80"):
    return basket.add_item(
        buyer_id,
        product_id=product_id,
        quantity=quantity,
        name=name,
        cost=Decimal(cost),
    )


def test_cmd_get_all(init_basket):
    response = basket.get_all()

    assert response.status is CommandStatus.COMPLETED
    assert len(response.body) == len(init_basket)
    assert all(isinstance(item, schemas.BasketItem) for item in response.body)


def test_cmd_get_all_empty(command_db):
    response = basket.get_all()

    assert response.status is CommandStatus.NOT_FOUND
    assert response.body is None


def test_cmd_get_all_error(init_basket, mock_crud_error):
    state, methods_called = mock_crud_error
    state["raises"] = {"get_all"}

    response = basket.get_all()

    assert methods_called == ["get_all"]
    assert response.status is CommandStatus.FAILED
    assert response.reason.startswith("GET-ALL - SQL or database error")


def test_cmd_get_basket(init_basket):
    response = basket.get_basket("alice")

    assert response.status is CommandStatus.COMPLETED
    assert [item.product_id for item in response.body] == [1, 2, 3]
    assert response.body[1] == schemas.BasketItem(
        id=response.body[1].id,
        buyer_id="alice",
        product_id=2,
        name="Netlogo Supercomputer",
        cost=Decimal("2005.99"),
        quantity=1,
    )


@pytest.mark.parametrize("buyer_id", ("carol", "ALICE", ""))
def test_cmd_get_basket_unknown_buyer(buyer_id, init_basket):
    response = basket.get_basket(buyer_id)

    assert response.status is CommandStatus.NOT_FOUND
    assert response.reason == "No baskets found"


def test_cmd_get_basket_error(init_basket, mock_crud_error):
    state, _methods_called = mock_crud_error
    state["raises"] = {"get_by_buyer"}

    response = basket.get_basket("alice")

    assert response.status is CommandStatus.FAILED
    assert "Database is gone" in response.reason


@pytest.mark.parametrize(
    "start, end, expected",
    (
        (0, 1, [1]),
        (0, 3, [1, 2, 3]),
        (1, 3, [2, 3]),
        (2, 10, [3]),
        (5, 10, []),
    ),
)
def test_cmd_get_basket_range(start, end, expected, init_basket):
    response = basket.get_basket_range("alice", start=start, end=end)

    assert response.status is CommandStatus.COMPLETED
    assert [item.product_id for item in response.body] == expected


@pytest.mark.parametrize("start, end", ((1, 1), (3, 2), (-1, 2)))
def test_cmd_get_basket_range_invalid(start, end, init_basket, mock_crud_error):
    _state, methods_called = mock_crud_error

    response = basket.get_basket_range("alice", start=start, end=end)

    assert response.status is CommandStatus.REJECTED
    assert methods_called == []


def test_cmd_get_basket_range_invalid_on_empty_table(command_db):
    response = basket.get_basket_range("alice", start=2, end=2)

    assert response.status is CommandStatus.REJECTED


def test_cmd_get_basket_range_unknown_buyer(init_basket):
    response = basket.get_basket_range("carol", start=0, end=2)

    assert response.status is CommandStatus.NOT_FOUND


def test_cmd_get_basket_range_error(init_basket, mock_crud_error):
    state, _methods_called = mock_crud_error
    state["raises"] = {"has_items"}

    response = basket.get_basket_range("alice", start=0, end=2)

    assert response.status is CommandStatus.FAILED


def test_cmd_get_item(init_basket):
    response = basket.get_item("alice", product_id=3)

    assert response.status is CommandStatus.COMPLETED
    assert len(response.body) == 1
    item = response.body[0]
    assert item.buyer_id == "alice"
    assert item.product_id == 3
    assert item.quantity == 2


def test_cmd_get_item_empty_table(command_db):
    response = basket.get_item("alice", product_id=3)

    assert response.status is CommandStatus.NOT_FOUND


@pytest.mark.parametrize("buyer_id, product_id", (("alice", 4), ("bob", 2), ("carol", 1)))
def test_cmd_get_item_unknown(buyer_id, product_id, init_basket):
    response = basket.get_item(buyer_id, product_id=product_id)

    assert response.status is CommandStatus.NOT_FOUND


def test_cmd_get_item_error(init_basket, mock_crud_error):
    state, _methods_called = mock_crud_error
    state["raises"] = {"get_by_key"}

    response = basket.get_item("alice", product_id=3)

    assert response.status is CommandStatus.FAILED


def test_cmd_add_new_item(command_db):
    response = _add()

    assert response.status is CommandStatus.COMPLETED
    item = response.body
    assert item.id is not None
    assert item.buyer_id == "u1"
    assert item.product_id == 1
    assert item.quantity == 5
    assert item.name == "Beans"
    assert item.cost == Decimal("0.80")


def test_cmd_add_merges_quantity(command_db):
    first = _add(quantity=5, name="Beans", cost="0.80")
    second = _add(quantity=3, name="Other name", cost="1.00")

    assert second.status is CommandStatus.COMPLETED
    assert second.body.id == first.body.id
    assert second.body.quantity == 8
    assert second.body.name == "Beans"
    assert second.body.cost == Decimal("0.80")

    response = basket.get_basket("u1")
    assert len(response.body) == 1


def test_cmd_add_keeps_other_buyers_apart(init_basket):
    response = _add(buyer_id="bob", product_id=2, quantity=1)

    assert response.status is CommandStatus.COMPLETED
    assert basket.get_item("alice", product_id=2).body[0].quantity == 1
    assert basket.get_item("bob", product_id=2).body[0].quantity == 1


@pytest.mark.parametrize("quantity", (0, -1, -10))
def test_cmd_add_non_positive_quantity(quantity, command_db, mock_crud_error):
    _state, methods_called = mock_crud_error

    response = _add(quantity=quantity)

    assert response.status is CommandStatus.REJECTED
    assert methods_called == []
    assert basket.get_all().status is CommandStatus.NOT_FOUND


def test_cmd_add_error(command_db, mock_crud_error):
    state, _methods_called = mock_crud_error
    state["raises"] = {"add_or_merge"}

    response = _add()

    assert response.status is CommandStatus.FAILED
    assert response.reason.startswith("ADD - Cannot add item")


def test_cmd_update_item(init_basket):
    response = basket.update_item("alice", product_id=1, quantity=2)

    assert response.status is CommandStatus.COMPLETED
    assert response.body.quantity == 2
    assert basket.get_item("alice", product_id=1).body[0].quantity == 2


def test_cmd_update_zero_quantity(init_basket):
    response = basket.update_item("alice", product_id=1, quantity=0)

    assert response.status is CommandStatus.REJECTED
    assert response.reason == "Quantity is 0. Please use the delete method for this."
    assert basket.get_item("alice", product_id=1).body[0].quantity == 5


def test_cmd_update_negative_quantity(init_basket):
    response = basket.update_item("alice", product_id=1, quantity=-3)

    assert response.status is CommandStatus.REJECTED
    assert basket.get_item("alice", product_id=1).body[0].quantity == 5


def test_cmd_update_unknown_item(init_basket):
    response = basket.update_item("carol", product_id=1, quantity=2)

    assert response.status is CommandStatus.NOT_FOUND
    assert response.reason == "No item found with those arguments"
    assert basket.get_basket("carol").status is CommandStatus.NOT_FOUND


@pytest.mark.parametrize("quantity", (0, -1))
def test_cmd_update_unknown_item_bad_quantity(quantity, init_basket, mock_crud_error):
    _state, methods_called = mock_crud_error

    response = basket.update_item("nobody", product_id=1, quantity=quantity)

    assert response.status is CommandStatus.NOT_FOUND
    assert methods_called == ["get_by_key"]


def test_cmd_update_error(init_basket, mock_crud_error):
    state, methods_called = mock_crud_error
    state["raises"] = {"set_quantity"}

    response = basket.update_item("alice", product_id=1, quantity=2)

    assert methods_called == ["get_by_key", "set_quantity"]
    assert response.status is CommandStatus.FAILED


def test_cmd_delete_item(init_basket):
    response = basket.delete_item("alice", product_id=2)

    assert response.status is CommandStatus.COMPLETED
    assert response.body.product_id == 2
    assert response.body.name == "Netlogo Supercomputer"
    assert basket.get_item("alice", product_id=2).status is CommandStatus.NOT_FOUND
    remaining = basket.get_basket("alice").body
    assert [item.product_id for item in remaining] == [1, 3]
    assert basket.get_item("bob", product_id=1).status is CommandStatus.COMPLETED


def test_cmd_delete_empty_table(command_db):
    response = basket.delete_item("alice", product_id=2)

    assert response.status is CommandStatus.NOT_FOUND


def test_cmd_delete_unknown_item(init_basket):
    response = basket.delete_item("bob", product_id=2)

    assert response.status is CommandStatus.NOT_FOUND
    assert response.reason == "No basket items found with those arguments"
    assert len(basket.get_all().body) == len(init_basket)


def test_cmd_delete_error(init_basket, mock_crud_error):
    state, _methods_called = mock_crud_error
    state["raises"] = {"delete"}

    response = basket.delete_item("alice", product_id=2)

    assert response.status is CommandStatus.FAILED
    assert basket.get_item("alice", product_id=2).status is CommandStatus.COMPLETED


def test_basket_scenario(command_db):
    assert _add("u1", 1, 5, "Beans", "0.80").body.quantity == 5
    assert _add("u1", 1, 3, "Beans", "0.80").body.quantity == 8

    assert basket.update_item("u1", product_id=1, quantity=2).body.quantity == 2
    rejected = basket.update_item("u1", product_id=1, quantity=0)
    assert rejected.status is CommandStatus.REJECTED
    assert basket.get_item("u1", product_id=1).body[0].quantity == 2

    deleted = basket.delete_item("u1", product_id=1)
    assert deleted.status is CommandStatus.COMPLETED
    assert basket.get_item("u1", product_id=1).status is CommandStatus.NOT_FOUND
