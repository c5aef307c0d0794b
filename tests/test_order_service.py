"""Tests for order persistence and admin order management."""

from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from wholesale.domain.models import ShippingAddress
from wholesale.domain.order_normalizer import normalize_order
from wholesale.domain.schemas import AdminOrderCreateIn, OrderUpdateIn
from wholesale.errors import OrderNotFoundError, OrderPersistError
from wholesale.services.order_service import OrderService, generate_order_id

ADDRESS = ShippingAddress(
    name="Gym Co", street="1 George St", city="Sydney", state="NSW",
    postal_code="2000", phone="0412345678",
)


@pytest.fixture
def orders(catalog):
    return OrderService(catalog)


def make_order(order_id, user_id, whey, quantity=2):
    order = normalize_order(
        {
            "id": order_id,
            "user_id": user_id,
            "user_name": "Gym Co",
            "email": "buyer@gymco.com.au",
            "items": [{"product": whey, "quantity": quantity}],
            "shipping_address": ADDRESS,
            "payment_method": "bank-transfer",
        }
    )
    order.total = Decimal("45.00") * quantity
    return order


class TestGenerateOrderId:
    def test_format(self):
        order_id = generate_order_id()
        prefix, millis, suffix = order_id.split("-")

        assert prefix == "ORDER"
        assert millis.isdigit()
        assert len(suffix) == 9

    def test_unique(self):
        assert len({generate_order_id() for _ in range(50)}) == 50


class TestCreateOrder:
    def test_persist_and_read_back(self, orders, whey, customer):
        orders.create_order(make_order("ORDER-A", "user-1", whey))

        order = orders.get_order("ORDER-A", customer)

        assert order.items[0].product.name == "Whey Protein Isolate 1kg"
        assert order.shipping_address.city == "Sydney"
        assert order.total == Decimal("90.00")
        assert order.created_at is not None

    def test_same_id_returns_existing(self, orders, whey, admin_user):
        first = orders.create_order(make_order("ORDER-A", "user-1", whey, quantity=2))
        second = orders.create_order(make_order("ORDER-A", "user-1", whey, quantity=5))

        assert second.items[0].quantity == first.items[0].quantity == 2
        assert len(orders.list_orders(admin_user)) == 1

    def test_database_failure_raises_persist_error(self, orders, whey, monkeypatch):
        def boom(values):
            raise OperationalError("INSERT", {}, Exception("db down"))

        monkeypatch.setattr(orders.repo, "create_order", boom)

        with pytest.raises(OrderPersistError):
            orders.create_order(make_order("ORDER-A", "user-1", whey))


class TestAccess:
    def test_customer_sees_only_own_orders(self, orders, whey, customer, admin_user):
        orders.create_order(make_order("ORDER-A", "user-1", whey))
        orders.create_order(make_order("ORDER-B", "user-2", whey))

        assert [o.id for o in orders.list_orders(customer)] == ["ORDER-A"]
        assert {o.id for o in orders.list_orders(admin_user)} == {"ORDER-A", "ORDER-B"}

    def test_foreign_order_forbidden(self, orders, whey, other_customer):
        orders.create_order(make_order("ORDER-A", "user-1", whey))

        with pytest.raises(PermissionError):
            orders.get_order("ORDER-A", other_customer)

    def test_missing_order(self, orders, customer):
        assert orders.get_order("nope", customer) is None


class TestAdminOperations:
    def test_status_change(self, orders, whey):
        orders.create_order(make_order("ORDER-A", "user-1", whey))

        order = orders.update_status("ORDER-A", "processing")

        assert order.status == "processing"
        assert order.updated_at is not None

    def test_status_change_missing(self, orders):
        with pytest.raises(OrderNotFoundError):
            orders.update_status("nope", "shipped")

    def test_update_keeps_total_unless_given(self, orders, whey):
        orders.create_order(make_order("ORDER-A", "user-1", whey))

        order = orders.update_order(
            "ORDER-A",
            OrderUpdateIn(items=[{"product_id": "wpi-1kg", "quantity": 10}], notes="call first"),
        )

        assert order.items[0].quantity == 10
        assert order.notes == "call first"
        assert order.total == Decimal("90.00")

        order = orders.update_order("ORDER-A", OrderUpdateIn(total=Decimal("400.00")))
        assert order.total == Decimal("400.00")

    def test_update_with_nulls_keeps_fields(self, orders, whey):
        orders.create_order(make_order("ORDER-A", "user-1", whey))
        orders.update_status("ORDER-A", "shipped")

        order = orders.update_order(
            "ORDER-A",
            OrderUpdateIn.model_validate({"notes": "x", "total": None, "status": None}),
        )

        assert order.total == Decimal("90.00")
        assert order.status == "shipped"
        assert order.notes == "x"

    def test_delete(self, orders, whey, customer):
        orders.create_order(make_order("ORDER-A", "user-1", whey))

        orders.delete_order("ORDER-A")

        assert orders.get_order("ORDER-A", customer) is None
        with pytest.raises(OrderNotFoundError):
            orders.delete_order("ORDER-A")

    def test_manual_order_with_custom_prices(self, orders):
        payload = AdminOrderCreateIn(
            user={"id": "user-9", "email": "cafe@example.com", "name": "Cafe"},
            items=[
                {"product_id": "wpi-1kg", "quantity": 10, "unit_price": "40.00"},
                {"product_id": "shaker", "quantity": 4},
            ],
            shipping_price=Decimal("15.00"),
            shipping_address=ADDRESS,
        )

        order = orders.create_admin_order(payload)

        assert order.id.startswith("ORDER-")
        assert order.items[0].effective_unit_price == Decimal("40.00")
        assert order.items[1].effective_unit_price == Decimal("8.50")
        assert order.total == Decimal("449.00")
        assert order.shipping_option.id == "manual"

    def test_manual_order_unknown_product(self, orders):
        payload = AdminOrderCreateIn(user={"id": "user-9"}, items=[{"product_id": "ghost", "quantity": 1}])

        with pytest.raises(ValueError, match="ghost"):
            orders.create_admin_order(payload)
