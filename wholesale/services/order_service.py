# wholesale/services/order_service.py
import random
import string
import time
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wholesale.domain.models import Order, ShippingOption, UserIdentity
from wholesale.domain.order_normalizer import (
    normalize_order,
    order_to_record,
    unresolved_product_ids,
)
from wholesale.domain.schemas import AdminOrderCreateIn, OrderUpdateIn
from wholesale.errors import OrderNotFoundError, OrderPersistError
from wholesale.repos.order_repo import OrderRepo, order_row_to_dict
from wholesale.repos.product_repo import ProductRepo
from wholesale.repos.tracking_repo import TrackingRepo
from wholesale.services.tracking_service import tracking_from_row
from wholesale.utils.logging import get_logger

logger = get_logger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_order_id() -> str:
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"ORDER-{int(time.time() * 1000)}-{suffix}"


class OrderService:
    """
    Serwis odpowiedzialny za domene zamowien.
    Kazdy odczyt przechodzi przez normalize_order, wiec na zewnatrz
    zawsze wychodzi ten sam ksztalt Order.
    """

    def __init__(self, db: Session):
        self.repo = OrderRepo(db)
        self.products = ProductRepo(db)
        self.tracking = TrackingRepo(db)

    def _normalize(self, raw: dict, with_tracking: bool = False) -> Order:
        lookup = self.products.get_products_by_ids(unresolved_product_ids(raw))
        order = normalize_order(raw, lookup)
        if with_tracking:
            row = self.tracking.get_by_order(order.id)
            if row is not None:
                order.tracking_info = tracking_from_row(row)
        return order

    #query
    def list_orders(self, user: UserIdentity) -> list[Order]:
        # admin widzi wszystko, reszta tylko swoje
        rows = self.repo.list_orders(None if user.is_admin else user.id)
        return [self._normalize(order_row_to_dict(r)) for r in rows]

    def get_order(self, order_id: str, user: UserIdentity | None = None) -> Order | None:
        row = self.repo.get_order(order_id)
        if not row:
            return None

        if user is not None and not user.is_admin and row.user_id != user.id:
            raise PermissionError("No access to this order")

        return self._normalize(order_row_to_dict(row), with_tracking=True)

    #commands
    def create_order(self, order: Order) -> Order:
        """
        Zapis zamowienia. Jesli zamowienie o tym id juz istnieje
        (ponowienie po bledzie), zwracamy istniejace zamiast tworzyc duplikat.
        """
        existing = self.repo.get_order(order.id)
        if existing is not None:
            logger.info(f"Order {order.id} already persisted, returning existing record")
            return self._normalize(order_row_to_dict(existing))

        try:
            created = self.repo.create_order(order_to_record(order))
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Failed to persist order {order.id}: {e}")
            raise OrderPersistError(f"Could not save order {order.id}") from e

        logger.info(f"Order {created.id} created, total {created.total}")
        return self._normalize(order_row_to_dict(created))

    def update_status(self, order_id: str, status: str) -> Order:
        row = self.repo.update_order_status(order_id, status, datetime.now(timezone.utc))
        if row is None:
            raise OrderNotFoundError(order_id)
        logger.info(f"Order {order_id} status changed to {status}")
        return self._normalize(order_row_to_dict(row))

    def update_order(self, order_id: str, changes: OrderUpdateIn) -> Order:
        """
        Edycja przez admina. total nie jest przeliczany z pozycji,
        zmienia sie tylko gdy przyszedl w requescie.
        """
        row = self.repo.get_order(order_id)
        if row is None:
            raise OrderNotFoundError(order_id)

        current = self._normalize(order_row_to_dict(row))
        data = current.model_dump()
        # null w requescie znaczy "bez zmian", nie "wyczysc pole"
        fields = changes.model_dump(exclude_unset=True, exclude_none=True)
        data.update(fields)
        data["updated_at"] = datetime.now(timezone.utc)

        updated = self._normalize(data)
        record = order_to_record(updated)
        record.pop("created_at", None)

        row = self.repo.update_order(order_id, record)
        logger.info(f"Order {order_id} updated: {sorted(fields)}")
        return self._normalize(order_row_to_dict(row))

    def delete_order(self, order_id: str) -> None:
        if not self.repo.delete_order(order_id):
            raise OrderNotFoundError(order_id)
        logger.info(f"Order {order_id} deleted")

    def create_admin_order(self, payload: AdminOrderCreateIn) -> Order:
        """
        Use Case: reczne zamowienie admina.
        1. pobiera produkty jednym zapytaniem
        2. normalizer dokleja pelne produkty do pozycji
        3. total = suma (unit_price albo cena produktu) x ilosc + wysylka
        """
        lookup = self.products.get_products_by_ids(line.product_id for line in payload.items)
        missing = [line.product_id for line in payload.items if line.product_id not in lookup]
        if missing:
            raise ValueError(f"Unknown products: {', '.join(missing)}")

        now = datetime.now(timezone.utc)
        raw = {
            "id": generate_order_id(),
            "user_id": payload.user.id,
            "user_name": payload.user.name or "",
            "email": payload.user.email or "",
            "items": [line.model_dump() for line in payload.items],
            "status": payload.status,
            "payment_method": payload.payment_method,
            "shipping_address": payload.shipping_address,
            "shipping_option": ShippingOption(
                id="manual",
                name="Manual shipping",
                carrier="other",
                price=payload.shipping_price,
                estimated_delivery_days="",
            ),
            "invoice_status": "draft",
            "notes": payload.notes,
            "created_at": now,
            "updated_at": now,
        }
        order = normalize_order(raw, lookup)
        order.total = sum((i.line_total for i in order.items), Decimal("0.00")) + payload.shipping_price
        return self.create_order(order)
