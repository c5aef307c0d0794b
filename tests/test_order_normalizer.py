"""Tests for turning stored and in-memory order records into one Order shape."""

import json
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from wholesale.domain.models import Order, Product
from wholesale.domain.order_normalizer import (
    UNKNOWN_PRODUCT_NAME,
    normalize_order,
    order_to_record,
    unresolved_product_ids,
)

CREATED = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)

ADDRESS = {
    "name": "Gym Co",
    "street": "1 George St",
    "city": "Sydney",
    "state": "NSW",
    "postal_code": "2000",
    "country": "AU",
    "phone": "0412345678",
}

OPTION = {
    "id": "auspost-parcel",
    "name": "Parcel Post",
    "carrier": "Australia Post",
    "price": "12.95",
    "estimated_delivery_days": "5-7 business days",
}

PRODUCT = {
    "id": "wpi-1kg",
    "name": "Whey Protein Isolate 1kg",
    "price": "45.00",
    "category": "Protein Powder",
}


def stored_row(**overrides):
    row = {
        "id": "ORDER-1",
        "user_id": "user-1",
        "user_name": "Gym Co",
        "email": "buyer@gymco.com.au",
        "items": json.dumps([{"product": PRODUCT, "quantity": 2}]),
        "shipping_address": json.dumps(ADDRESS),
        "shipping_option": json.dumps(OPTION),
        "total": Decimal("102.95"),
        "status": "processing",
        "payment_method": "bank-transfer",
        "created_at": CREATED,
        "updated_at": None,
    }
    row.update(overrides)
    return row


class TestStoredAndInMemoryAgree:
    def test_same_order_from_both_shapes(self):
        from_db = normalize_order(stored_row())
        in_memory = normalize_order(
            {
                "id": "ORDER-1",
                "userId": "user-1",
                "userName": "Gym Co",
                "email": "buyer@gymco.com.au",
                "items": [{"product": PRODUCT, "quantity": 2}],
                "shippingAddress": {**ADDRESS, "postalCode": "2000"},
                "shippingOption": {**OPTION, "estimatedDeliveryDays": "5-7 business days"},
                "total": "102.95",
                "status": "processing",
                "paymentMethod": "bank-transfer",
                "createdAt": CREATED,
            }
        )

        assert from_db == in_memory

    def test_record_roundtrip(self):
        order = normalize_order(stored_row())
        record = order_to_record(order)

        assert isinstance(record["items"], str)
        assert json.loads(record["shipping_address"])["postal_code"] == "2000"
        assert normalize_order(record) == order

    def test_normalizing_an_order_is_stable(self):
        order = normalize_order(stored_row())
        assert normalize_order(order) == order


class TestDefaults:
    def test_minimal_record(self):
        order = normalize_order({"id": 42, "items": "[]"})

        assert order.id == "42"
        assert order.status == "pending"
        assert order.user_name == ""
        assert order.email == ""
        assert order.total == Decimal("0.00")
        assert order.items == []
        assert order.created_at is None

    def test_updated_at_falls_back_to_created_at(self):
        order = normalize_order(stored_row())
        assert order.updated_at == CREATED

    def test_blank_json_columns(self):
        order = normalize_order(stored_row(shipping_address="", shipping_option=None))

        assert order.shipping_address is None
        assert order.shipping_cost == Decimal("0.00")

    def test_bytes_payload(self):
        order = normalize_order(stored_row(items=json.dumps([{"product": PRODUCT, "quantity": 1}]).encode()))
        assert order.items[0].quantity == 1

    def test_missing_quantity_defaults_to_one(self):
        order = normalize_order(stored_row(items=json.dumps([{"product": PRODUCT}])))
        assert order.items[0].quantity == 1

    def test_zero_quantity_rejected(self):
        with pytest.raises(ValidationError):
            normalize_order(stored_row(items=json.dumps([{"product": PRODUCT, "quantity": 0}])))


class TestProductResolution:
    def test_lookup_fills_id_only_items(self):
        raw = stored_row(items=json.dumps([{"product_id": "wpi-1kg", "quantity": 3}]))
        lookup = {"wpi-1kg": Product.model_validate(PRODUCT)}

        assert unresolved_product_ids(raw) == {"wpi-1kg"}
        order = normalize_order(raw, lookup)

        assert order.items[0].product.name == "Whey Protein Isolate 1kg"
        assert order.items[0].product.category.name == "Protein Powder"

    def test_snapshot_wins_over_lookup(self):
        raw = stored_row(items=json.dumps([{"product": {"id": "wpi-1kg", "name": "Old name"}, "quantity": 1}]))
        lookup = {"wpi-1kg": Product.model_validate(PRODUCT)}

        item = normalize_order(raw, lookup).items[0]

        assert item.product.name == "Old name"
        assert item.product.price == Decimal("45.00")

    def test_missing_product_becomes_placeholder(self):
        raw = stored_row(items=json.dumps([{"productId": "gone", "quantity": 2, "unitPrice": "30.00"}]))

        item = normalize_order(raw).items[0]

        assert item.product.id == "gone"
        assert item.product.name == UNKNOWN_PRODUCT_NAME
        assert item.product.price == Decimal("30.00")
        assert item.line_total == Decimal("60.00")

    def test_materialized_items_need_no_lookup(self):
        assert unresolved_product_ids(stored_row()) == set()


class TestUnitPrice:
    def test_unit_price_overrides_product_price(self):
        raw = stored_row(items=json.dumps([{"product": PRODUCT, "quantity": 2, "unit_price": "39.00"}]))

        item = normalize_order(raw).items[0]

        assert item.effective_unit_price == Decimal("39.00")
        assert item.line_total == Decimal("78.00")

    def test_total_is_not_recomputed(self):
        order = normalize_order(stored_row(total=Decimal("1.00")))
        assert order.total == Decimal("1.00")


def test_input_not_modified():
    raw = stored_row()
    snapshot = dict(raw)
    normalize_order(raw)
    assert raw == snapshot


def test_returns_order_instance():
    assert isinstance(normalize_order(stored_row()), Order)
