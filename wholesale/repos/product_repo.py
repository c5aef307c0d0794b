# wholesale/repos/product_repo.py
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from wholesale.data.models.product import ProductModel
from wholesale.domain.models import Product


def product_from_model(row: ProductModel) -> Product:
    return Product(
        id=row.id,
        name=row.name,
        description=row.description or "",
        price=row.price,
        stock=row.stock,
        category={"id": row.category.id, "name": row.category.name} if row.category else None,
        min_quantity=row.min_quantity,
        weight=row.weight,
        image=row.image,
        serving_size=row.serving_size,
        number_of_servings=row.number_of_servings,
        bag_size=row.bag_size,
        ingredients=row.ingredients,
        amino_acid_profile=row.amino_acid_profile,
        nutritional_info=row.nutritional_info,
    )


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: str) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_products_by_ids(self, product_ids: Iterable[str]) -> dict[str, Product]:
        ids = list({str(i) for i in product_ids})
        if not ids:
            return {}
        rows = self.db.execute(
            select(ProductModel).where(ProductModel.id.in_(ids))
        ).scalars().all()
        return {row.id: product_from_model(row) for row in rows}
