from sqlalchemy import Column, Integer, String, DateTime
from datetime import datetime, timezone

from wholesale.data.database import Base


class ShippingAddressModel(Base):
    __tablename__ = "shipping_addresses"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False, unique=True)

    name = Column(String, nullable=False)
    street = Column(String, nullable=False)
    city = Column(String, nullable=False)
    state = Column(String, nullable=False)
    postal_code = Column(String, nullable=False)
    country = Column(String, nullable=False, default="AU")
    phone = Column(String, nullable=False)

    updated_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
