import pytest

from storefront.errors import ValidationError
from storefront.payments.line_items import to_line_items, make_metadata, METADATA_VALUE_MAX
from storefront.payments.metadata import extract_metadata_from_session, extract_purchased_items


def _row(pid, price, qty, **product):
    return {"id": f"ci-{pid}", "product_id": pid, "quantity": qty, "product": {"id": pid, "name": f"Produit {pid}", "price": price, **product}}


def test_line_items_use_server_prices_in_minor_units():
    items = to_line_items([_row("p-1", "19.99", 2), _row("p-2", 10.005, 1)], "usd")
    assert [li["quantity"] for li in items] == [2, 1]
    assert [li["price_data"]["unit_amount"] for li in items] == [1999, 1001]
    assert items[0]["price_data"]["currency"] == "usd"
    assert items[0]["price_data"]["product_data"]["metadata"] == {"product_id": "p-1"}


def test_line_items_cap_images_and_skip_empty_description():
    images = [f"https://img.test/{i}.png" for i in range(10)]
    [li] = to_line_items([_row("p-1", "5", 1, images=images, description="")], "eur")
    product_data = li["price_data"]["product_data"]
    assert len(product_data["images"]) == 8
    assert "description" not in product_data


def test_line_items_skip_rows_without_product():
    rows = [{"id": "ci-x", "product_id": "gone", "quantity": 1, "product": None}, _row("p-1", "5", 1)]
    items = to_line_items(rows, "usd")
    assert len(items) == 1


def test_line_items_empty_cart_raises():
    with pytest.raises(ValidationError):
        to_line_items([], "usd")


def test_metadata_keeps_values_intact():
    address = "x" * METADATA_VALUE_MAX
    meta = make_metadata("u1", "Ada", "ada@example.com", address)
    assert meta == {"user_id": "u1", "shipping_name": "Ada", "shipping_email": "ada@example.com", "shipping_address": address}


def test_metadata_rejects_value_over_stripe_limit():
    with pytest.raises(ValidationError) as exc:
        make_metadata("u1", "Ada", "ada@example.com", "x" * 900)
    assert "shipping_address" in exc.value.message


def test_extract_metadata_accepts_camel_case_keys():
    user_id, shipping = extract_metadata_from_session(
        {"metadata": {"userId": "u9", "shippingName": "Bob", "shippingEmail": "bob@example.com", "shippingAddress": "2 rue"}}
    )
    assert user_id == "u9"
    assert shipping == {"shipping_name": "Bob", "shipping_email": "bob@example.com", "shipping_address": "2 rue"}


def test_extract_metadata_without_user():
    user_id, shipping = extract_metadata_from_session({"metadata": {}})
    assert user_id is None
    assert shipping["shipping_name"] == ""


def test_purchased_items_from_expanded_line_items():
    line_items = [
        {"quantity": 3, "amount_total": 1500, "description": "Mug",
         "price": {"unit_amount": 500, "product": {"name": "Mug", "metadata": {"product_id": "p-1"}}}},
        {"quantity": 2, "amount_total": 800, "amount_subtotal": 800, "description": "Old",
         "price": {"unit_amount": None, "product": "prod_unexpanded"}},
    ]
    first, second = extract_purchased_items(line_items)
    assert first["product_id"] == "p-1"
    assert str(first["unit_price"]) == "5.00"
    assert second["product_id"] is None
    assert second["name"] == "Old"
    assert str(second["unit_price"]) == "4.00"
