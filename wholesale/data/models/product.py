# wholesale/data/models/product.py
from sqlalchemy import Column, Integer, ForeignKey, String, Numeric, Text, JSON, DateTime, CheckConstraint
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from wholesale.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_products_stock"),
        CheckConstraint("min_quantity >= 1", name="ck_products_min_quantity"),
    )

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    price = Column(Numeric(10, 2), nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    min_quantity = Column(Integer, nullable=False, default=1)
    weight = Column(Numeric(8, 3), nullable=True)  # kg
    image = Column(String, nullable=True)

    serving_size = Column(String, nullable=True)
    number_of_servings = Column(Integer, nullable=True)
    bag_size = Column(String, nullable=True)
    ingredients = Column(Text, nullable=True)
    amino_acid_profile = Column(JSON, nullable=True)
    nutritional_info = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    category = relationship("CategoryModel", lazy="joined")
