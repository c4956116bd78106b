from decimal import Decimal

import pytest

from order_service.domain.errors import (
    CartItemNotFound,
    CatalogUnavailable,
    ProductNotFound,
    ValidationError,
)
from order_service.services.cart_service import CartService


@pytest.fixture
def carts(db, catalog, lock_service):
    return CartService(db, catalog, lock_service)


def test_missing_cart_is_empty(carts):
    assert carts.get_lines("nobody") == []
    assert carts.get_cart("nobody") == {"items": [], "total": Decimal("0.00")}


def test_add_same_product_accumulates(carts):
    carts.add_item("u1", "p1", 2)
    carts.add_item("u1", "p1", 3)

    assert carts.get_lines("u1") == [("p1", 5)]


def test_add_keeps_insertion_order(carts):
    carts.add_item("u1", "p2", 1)
    carts.add_item("u1", "p1", 1)
    carts.add_item("u1", "p2", 1)

    assert carts.get_lines("u1") == [("p2", 2), ("p1", 1)]


def test_add_unknown_product(carts):
    with pytest.raises(ProductNotFound):
        carts.add_item("u1", "nope", 1)
    assert carts.get_lines("u1") == []


def test_add_when_catalog_down(carts, catalog):
    catalog.unavailable.add("p1")
    with pytest.raises(CatalogUnavailable):
        carts.add_item("u1", "p1", 1)


@pytest.mark.parametrize("quantity", [0, -1])
def test_add_rejects_non_positive_quantity(carts, quantity):
    with pytest.raises(ValidationError):
        carts.add_item("u1", "p1", quantity)


def test_carts_are_per_user(carts):
    carts.add_item("u1", "p1", 1)
    carts.add_item("u2", "p2", 4)

    assert carts.get_lines("u1") == [("p1", 1)]
    assert carts.get_lines("u2") == [("p2", 4)]


def test_cart_view_is_enriched_from_catalog(carts):
    carts.add_item("u1", "p1", 2)
    carts.add_item("u1", "p2", 1)

    view = carts.get_cart("u1")

    assert view["items"][0] == {
        "product_id": "p1",
        "name": "Keyboard",
        "price": Decimal("10"),
        "quantity": 2,
        "image": "kb.png",
        "subtotal": Decimal("20"),
    }
    assert view["total"] == Decimal("24.50")


def test_cart_view_skips_unavailable_products(carts, catalog):
    carts.add_item("u1", "p1", 1)
    carts.add_item("u1", "p2", 1)
    catalog.unavailable.add("p1")

    view = carts.get_cart("u1")

    assert [i["product_id"] for i in view["items"]] == ["p2"]
    assert view["total"] == Decimal("4.50")


def test_update_item_sets_quantity(carts):
    carts.add_item("u1", "p1", 2)
    carts.update_item("u1", "p1", 7)

    assert carts.get_lines("u1") == [("p1", 7)]


def test_update_missing_item(carts):
    with pytest.raises(CartItemNotFound):
        carts.update_item("u1", "p1", 1)


def test_remove_item(carts):
    carts.add_item("u1", "p1", 1)
    carts.add_item("u1", "p2", 1)

    carts.remove_item("u1", "p1")
    carts.remove_item("u1", "p1")

    assert carts.get_lines("u1") == [("p2", 1)]


def test_remove_cart_is_idempotent(carts):
    carts.add_item("u1", "p1", 1)

    carts.remove_cart("u1")
    carts.remove_cart("u1")
    carts.remove_cart("never-had-one")

    assert carts.get_lines("u1") == []


def test_mutations_take_user_lock(carts, lock_service):
    carts.add_item("u1", "p1", 1)
    carts.update_item("u1", "p1", 2)
    carts.remove_item("u1", "p1")
    carts.remove_cart("u1")

    assert lock_service.acquired == ["u1", "u1", "u1", "u1"]
