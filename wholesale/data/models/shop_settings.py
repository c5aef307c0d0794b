from sqlalchemy import Column, String, JSON, DateTime
from datetime import datetime, timezone

from wholesale.data.database import Base


class ShopSettingsModel(Base):
    __tablename__ = "shop_settings"

    key = Column(String, primary_key=True)
    value = Column(JSON, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
