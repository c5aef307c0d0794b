from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from wholesale.data.models.shipping_address import ShippingAddressModel
from wholesale.domain.models import ShippingAddress


class ShippingAddressRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_for_user(self, user_id: str) -> ShippingAddress | None:
        row = self.db.execute(
            select(ShippingAddressModel).where(ShippingAddressModel.user_id == user_id)
        ).scalar_one_or_none()
        if row is None:
            return None
        return ShippingAddress(
            name=row.name,
            street=row.street,
            city=row.city,
            state=row.state,
            postal_code=row.postal_code,
            country=row.country,
            phone=row.phone,
        )

    def upsert(self, user_id: str, address: ShippingAddress) -> None:
        row = self.db.execute(
            select(ShippingAddressModel).where(ShippingAddressModel.user_id == user_id)
        ).scalar_one_or_none()
        if row is None:
            row = ShippingAddressModel(user_id=user_id)
            self.db.add(row)
        for key, value in address.model_dump().items():
            setattr(row, key, value)
        row.updated_at = datetime.now(timezone.utc)
        self.db.commit()
