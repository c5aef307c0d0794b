from sqlalchemy import Column, String, DateTime, Numeric, Text
from datetime import datetime, timezone

from wholesale.data.database import Base


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=True, index=True)
    user_name = Column(String, nullable=True)
    email = Column(String, nullable=True)

    # items / shipping_address / shipping_option jako json w jednej kolumnie
    items = Column(Text, nullable=False, default="[]")
    shipping_address = Column(Text, nullable=True)
    shipping_option = Column(Text, nullable=True)

    total = Column(Numeric(10, 2), nullable=False)
    status = Column(String, nullable=False, default="pending")  # pending, processing, shipped, delivered, cancelled
    payment_method = Column(String, nullable=True)
    invoice_status = Column(String, nullable=True)
    invoice_url = Column(String, nullable=True)
    invoice_number = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), nullable=True)
