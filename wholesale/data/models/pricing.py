# wholesale/data/models/pricing.py
from sqlalchemy import Column, Integer, ForeignKey, String, Numeric, Text, UniqueConstraint

from wholesale.data.database import Base


class PricingTierModel(Base):
    __tablename__ = "pricing_tiers"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False, unique=True)
    description = Column(Text, nullable=True)
    discount_percentage = Column(Numeric(5, 2), nullable=False, default=0)


class ProductPriceModel(Base):
    __tablename__ = "product_prices"
    __table_args__ = (UniqueConstraint("product_id", "tier_id", name="u_product_tier"),)

    id = Column(Integer, primary_key=True)
    product_id = Column(String, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    tier_id = Column(Integer, ForeignKey("pricing_tiers.id", ondelete="CASCADE"), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)


class UserPricingTierModel(Base):
    __tablename__ = "user_pricing_tiers"

    id = Column(Integer, primary_key=True)
    # jeden tier na uzytkownika
    user_id = Column(String, nullable=False, unique=True)
    tier_id = Column(Integer, ForeignKey("pricing_tiers.id", ondelete="CASCADE"), nullable=False)
