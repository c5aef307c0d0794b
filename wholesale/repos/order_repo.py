# wholesale/repos/order_repo.py
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from wholesale.data.models.order import OrderModel

_COLUMNS = (
    "id", "user_id", "user_name", "email", "items", "shipping_address",
    "shipping_option", "total", "status", "payment_method", "invoice_status",
    "invoice_url", "invoice_number", "notes", "created_at", "updated_at",
)


def order_row_to_dict(row: OrderModel) -> dict[str, Any]:
    return {c: getattr(row, c) for c in _COLUMNS}


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, values: dict[str, Any]) -> OrderModel:
        order = OrderModel(**{k: v for k, v in values.items() if k in _COLUMNS and v is not None})
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        return order

    def get_order(self, order_id: str) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def list_orders(self, user_id: str | None = None) -> list[OrderModel]:
        stmt = select(OrderModel).order_by(OrderModel.created_at.desc())
        if user_id is not None:
            stmt = stmt.where(OrderModel.user_id == user_id)
        return list(self.db.execute(stmt).scalars().all())

    def update_order(self, order_id: str, values: dict[str, Any]) -> OrderModel | None:
        # brak kontroli wersji, ostatni zapis wygrywa
        order = self.get_order(order_id)
        if order:
            for key, value in values.items():
                if key in _COLUMNS and key != "id":
                    setattr(order, key, value)
            self.db.commit()
            self.db.refresh(order)
        return order

    def update_order_status(self, order_id: str, status: str, updated_at) -> OrderModel | None:
        return self.update_order(order_id, {"status": status, "updated_at": updated_at})

    def delete_order(self, order_id: str) -> bool:
        order = self.get_order(order_id)
        if not order:
            return False
        self.db.delete(order)
        self.db.commit()
        return True

    def rollback(self):
        self.db.rollback()
