# storefront/repos/cart_repo.py
from typing import List

from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart_items(self, user_id: str) -> List[CartItemModel]:
        return list(
            self.db.execute(
                select(CartItemModel)
                .where(CartItemModel.user_id == user_id)
                .order_by(CartItemModel.created_at.desc())
            )
            .scalars()
            .unique()
            .all()
        )

    def get_cart_item(self, cart_item_id: str) -> CartItemModel | None:
        return self.db.get(CartItemModel, cart_item_id)

    def get_cart_item_by_product(self, user_id: str, product_id: str) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.user_id == user_id,
                CartItemModel.product_id == product_id,
            )
        ).scalars().first()

    def save_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        return item

    def delete_cart_item(self, item: CartItemModel) -> None:
        self.db.delete(item)
        self.db.commit()

    def clear_cart(self, user_id: str) -> int:
        result = self.db.execute(delete(CartItemModel).where(CartItemModel.user_id == user_id))
        self.db.commit()
        return result.rowcount
