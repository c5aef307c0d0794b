from sqlalchemy import Column, Integer, ForeignKey, String, Date

from wholesale.data.database import Base


class TrackingInfoModel(Base):
    __tablename__ = "tracking_info"

    id = Column(Integer, primary_key=True)
    order_id = Column(String, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, unique=True)

    tracking_number = Column(String, nullable=False)
    carrier = Column(String, nullable=False)
    tracking_url = Column(String, nullable=True)
    shipped_date = Column(Date, nullable=True)
    estimated_delivery_date = Column(Date, nullable=True)
