from sqlalchemy import select
from sqlalchemy.orm import Session

from wholesale.data.models.tracking_info import TrackingInfoModel


class TrackingRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_by_order(self, order_id: str) -> TrackingInfoModel | None:
        return self.db.execute(
            select(TrackingInfoModel).where(TrackingInfoModel.order_id == order_id)
        ).scalar_one_or_none()

    def upsert(self, order_id: str, values: dict) -> TrackingInfoModel:
        row = self.get_by_order(order_id)
        if row is None:
            row = TrackingInfoModel(order_id=order_id)
            self.db.add(row)
        for key, value in values.items():
            setattr(row, key, value)
        self.db.commit()
        self.db.refresh(row)
        return row
