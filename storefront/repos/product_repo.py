# storefront/repos/product_repo.py
from typing import Iterable, List

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: str) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_products(self, product_ids: Iterable[str]) -> List[ProductModel]:
        ids = list(product_ids)
        if not ids:
            return []
        return list(self.db.execute(select(ProductModel).where(ProductModel.id.in_(ids))).scalars().all())

    def list_products(self, status: str | None = None) -> List[ProductModel]:
        query = select(ProductModel).order_by(ProductModel.name)
        if status:
            query = query.where(ProductModel.status == status)
        return list(self.db.execute(query).scalars().all())
