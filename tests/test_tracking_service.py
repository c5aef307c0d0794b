"""Tests for shipment tracking."""

from datetime import date
from decimal import Decimal

import pytest

from wholesale.domain.models import EmailSettings
from wholesale.domain.order_normalizer import normalize_order
from wholesale.domain.schemas import TrackingIn
from wholesale.errors import OrderNotFoundError
from wholesale.services.notification_service import NotificationService
from wholesale.services.order_service import OrderService
from wholesale.services.tracking_service import (
    TrackingService,
    detect_carrier,
    estimated_delivery_date,
    tracking_url,
    validate_tracking_number,
)


class TestDetectCarrier:
    @pytest.mark.parametrize(
        "number,carrier",
        [
            ("AB123456789AU", "Australia Post"),
            ("ab 123 456 789 au", "Australia Post"),
            ("CON1234567890", "StarTrack"),
            ("1234567890", "DHL"),
            ("123456789012", "FedEx"),
            ("1Z999AA10123456784", "UPS"),
            ("123456789", "TNT"),
            ("ABCD1234567890", "Toll"),
        ],
    )
    def test_known_formats(self, number, carrier):
        assert detect_carrier(number) == carrier

    def test_unknown(self):
        assert detect_carrier("xyz") is None
        assert detect_carrier("") is None


class TestHelpers:
    def test_tracking_url(self):
        assert tracking_url("AB123456789AU", "Australia Post") == (
            "https://auspost.com.au/mypost/track/#/details/AB123456789AU"
        )
        assert tracking_url("123", "Pigeon Express") is None

    def test_delivery_date_skips_weekend(self):
        # piatek + 3 dni robocze = sroda
        assert estimated_delivery_date("Australia Post", date(2024, 3, 1)) == date(2024, 3, 6)

    def test_validate_by_length(self):
        assert validate_tracking_number("ABCDEFGHIJK", "Australia Post")
        assert not validate_tracking_number("123", "Australia Post")
        assert not validate_tracking_number("", "DHL")


class TestAddTracking:
    @pytest.fixture
    def order_id(self, catalog, whey):
        order = normalize_order(
            {
                "id": "ORDER-T1",
                "user_id": "user-1",
                "email": "buyer@gymco.com.au",
                "items": [{"product": whey, "quantity": 1}],
                "total": Decimal("45.00"),
            }
        )
        return OrderService(catalog).create_order(order).id

    @pytest.fixture
    def service(self, catalog, email_client):
        return TrackingService(catalog, NotificationService(EmailSettings()))

    def test_marks_order_shipped_and_emails_customer(self, service, order_id, catalog, email_client, customer):
        tracking = service.add_tracking(order_id, TrackingIn(tracking_number="CON1234567890"))

        assert tracking.carrier == "StarTrack"
        assert tracking.tracking_url.endswith("CON1234567890")
        assert tracking.estimated_delivery_date is not None

        order = OrderService(catalog).get_order(order_id, customer)
        assert order.status == "shipped"
        assert order.tracking_info.tracking_number == "CON1234567890"

        assert email_client.sent[0]["to"] == ["buyer@gymco.com.au"]
        assert email_client.sent[0]["subject"] == f"Your order #{order_id} has shipped!"

    def test_replaces_existing_tracking(self, service, order_id):
        service.add_tracking(order_id, TrackingIn(tracking_number="CON1234567890"))
        service.add_tracking(order_id, TrackingIn(tracking_number="AB123456789AU"))

        assert service.get_tracking(order_id).carrier == "Australia Post"

    def test_explicit_values_kept(self, service, order_id):
        tracking = service.add_tracking(
            order_id,
            TrackingIn(
                tracking_number="ABC12345",
                carrier="Aramex",
                shipped_date=date(2024, 3, 1),
                estimated_delivery_date=date(2024, 3, 10),
            ),
        )

        assert tracking.carrier == "Aramex"
        assert tracking.estimated_delivery_date == date(2024, 3, 10)
        assert tracking.tracking_url.startswith("https://www.aramex.com")

    def test_undetectable_carrier(self, service, order_id):
        with pytest.raises(ValueError):
            service.add_tracking(order_id, TrackingIn(tracking_number="??"))

    def test_missing_order(self, service):
        with pytest.raises(OrderNotFoundError):
            service.add_tracking("nope", TrackingIn(tracking_number="CON1234567890"))

    def test_no_tracking_yet(self, service, order_id):
        assert service.get_tracking(order_id) is None
