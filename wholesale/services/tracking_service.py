# wholesale/services/tracking_service.py
import re
from datetime import date, datetime, timedelta, timezone

from sqlalchemy.orm import Session

from wholesale.domain.models import TrackingInfo
from wholesale.domain.schemas import TrackingIn
from wholesale.errors import OrderNotFoundError
from wholesale.domain.order_normalizer import normalize_order
from wholesale.repos.order_repo import OrderRepo, order_row_to_dict
from wholesale.repos.tracking_repo import TrackingRepo
from wholesale.services.notification_service import NotificationService
from wholesale.utils.logging import get_logger

logger = get_logger(__name__)

# kolejnosc ma znaczenie, pierwszy pasujacy wzorzec wygrywa
_CARRIER_PATTERNS = (
    ("Australia Post", (r"^[A-Z]{2}\d{9}AU$", r"^[A-Z]\d{10}$")),
    ("StarTrack", (r"^CON\d{10}$", r"^[A-Z]{3}\d{8}$")),
    ("DHL", (r"^\d{10}$", r"^\d{11}$")),
    ("FedEx", (r"^\d{12}$", r"^\d{14}$")),
    ("UPS", (r"^1Z[A-Z0-9]{16}$",)),
    ("TNT", (r"^\d{9}$",)),
    ("Toll", (r"^[A-Z]{4}\d{10}$",)),
)

_TRACKING_URLS = {
    "Australia Post": "https://auspost.com.au/mypost/track/#/details/{n}",
    "StarTrack": "https://www.startrack.com.au/track-trace/?id={n}",
    "DHL": "https://www.dhl.com/au-en/home/tracking/tracking-express.html?submit=1&tracking-id={n}",
    "FedEx": "https://www.fedex.com/fedextrack/?tracknumber={n}",
    "UPS": "https://www.ups.com/track?tracknum={n}",
    "TNT": "https://www.tnt.com/express/en_au/site_tools/tracking.html?searchType=con&cons={n}",
    "Toll": "https://www.tollgroup.com/track-trace?trackingNumber={n}",
    "Aramex": "https://www.aramex.com/au/track/results?ShipmentNumber={n}",
}

# dni robocze
_DELIVERY_DAYS = {
    "Australia Post": 3,
    "StarTrack": 2,
    "DHL": 1,
    "FedEx": 1,
    "UPS": 1,
    "TNT": 2,
    "Toll": 3,
    "Aramex": 2,
}


def _clean(tracking_number: str) -> str:
    return re.sub(r"\s", "", tracking_number or "")


def detect_carrier(tracking_number: str) -> str | None:
    number = _clean(tracking_number).upper()
    if not number:
        return None
    for carrier, patterns in _CARRIER_PATTERNS:
        if any(re.match(p, number) for p in patterns):
            return carrier
    return None


def tracking_url(tracking_number: str, carrier: str) -> str | None:
    number = _clean(tracking_number)
    template = _TRACKING_URLS.get(carrier)
    if not number or not template:
        return None
    return template.format(n=number)


def estimated_delivery_date(carrier: str, start: date | None = None) -> date:
    """Dodaje dni robocze przewoznika, weekendy pomijamy."""
    current = start or datetime.now(timezone.utc).date()
    remaining = _DELIVERY_DAYS.get(carrier, 3)
    while remaining > 0:
        current += timedelta(days=1)
        if current.weekday() < 5:
            remaining -= 1
    return current


def validate_tracking_number(tracking_number: str, carrier: str) -> bool:
    if not tracking_number or not carrier:
        return False

    number = _clean(tracking_number).upper()
    if detect_carrier(number) == carrier:
        return True

    n = len(number)
    if carrier in ("Australia Post", "StarTrack"):
        return 10 <= n <= 13
    if carrier == "DHL":
        return 10 <= n <= 11
    if carrier == "FedEx":
        return 12 <= n <= 14
    if carrier == "UPS":
        return n == 18 and number.startswith("1Z")
    if carrier == "TNT":
        return n == 9
    if carrier == "Toll":
        return n >= 10
    return n >= 8


def tracking_from_row(row) -> TrackingInfo:
    return TrackingInfo(
        tracking_number=row.tracking_number,
        carrier=row.carrier,
        tracking_url=row.tracking_url,
        shipped_date=row.shipped_date,
        estimated_delivery_date=row.estimated_delivery_date,
    )


class TrackingService:
    def __init__(self, db: Session, notifications: NotificationService | None = None):
        self.repo = TrackingRepo(db)
        self.orders = OrderRepo(db)
        self.notifications = notifications

    def get_tracking(self, order_id: str) -> TrackingInfo | None:
        row = self.repo.get_by_order(order_id)
        return tracking_from_row(row) if row else None

    def build_tracking(self, payload: TrackingIn, today: date | None = None) -> TrackingInfo:
        carrier = payload.carrier or detect_carrier(payload.tracking_number)
        if not carrier:
            raise ValueError(f"Could not detect carrier for tracking number {payload.tracking_number}")
        if not validate_tracking_number(payload.tracking_number, carrier):
            raise ValueError(f"Tracking number {payload.tracking_number} is not valid for {carrier}")

        shipped = payload.shipped_date or today or datetime.now(timezone.utc).date()
        return TrackingInfo(
            tracking_number=_clean(payload.tracking_number),
            carrier=carrier,
            tracking_url=payload.tracking_url or tracking_url(payload.tracking_number, carrier),
            shipped_date=shipped,
            estimated_delivery_date=payload.estimated_delivery_date
            or estimated_delivery_date(carrier, shipped),
        )

    def add_tracking(self, order_id: str, payload: TrackingIn) -> TrackingInfo:
        """
        Use Case: dodanie trackingu.
        1. zapis tracking_info
        2. status zamowienia -> shipped
        3. mail do klienta (async, bez wplywu na wynik)
        """
        if self.orders.get_order(order_id) is None:
            raise OrderNotFoundError(order_id)

        tracking = self.build_tracking(payload)
        self.repo.upsert(order_id, tracking.model_dump())
        row = self.orders.update_order_status(order_id, "shipped", datetime.now(timezone.utc))

        logger.info(f"Tracking {tracking.tracking_number} ({tracking.carrier}) added to order {order_id}")

        if self.notifications is not None:
            order = normalize_order(order_row_to_dict(row))
            self.notifications.send_tracking_notification(order, tracking)

        return tracking
