# storefront/services/cart_service.py
from decimal import Decimal
from typing import Dict, Any

from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel
from storefront.domain.cart import CartSyncResult
from storefront.domain.enums import ProductStatus
from storefront.domain.errors import CartError, NotFoundError
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services.cart_sync import CartSyncService, ServiceCartGateway
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _item_to_dict(item: CartItemModel) -> Dict[str, Any]:
    return {
        "id": item.id,
        "product_id": item.product_id,
        "quantity": item.quantity,
        "product": {
            "id": item.product.id,
            "name": item.product.name,
            "price": item.product.price,
        },
    }


class CartService:
    """
    Koszyk zalogowanego uzytkownika (koszyk serwera)
    query (get_cart) tylko odczyt
    commands (add, update, remove, clear, sync) modyfikuja stan
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)

    #query
    def get_cart(self, user_id: str) -> Dict[str, Any]:
        items = self.repo.get_cart_items(user_id)
        total = sum((i.product.price * i.quantity for i in items), Decimal("0.00"))

        return {
            "items": [_item_to_dict(i) for i in items],
            "total": total,
            "count": len(items),
        }

    #commands
    def add_to_cart(self, user_id: str, product_id: str, quantity: int = 1) -> Dict[str, Any]:
        if quantity <= 0:
            raise CartError("Quantity must be greater than 0")

        product = self.products.get_product(product_id)

        if not product:
            raise NotFoundError("Product not found")

        if product.status != ProductStatus.ACTIVE.value:
            raise CartError("Product is not available")

        if product.track_quantity and product.quantity < quantity:
            raise CartError("Insufficient stock")

        existing = self.repo.get_cart_item_by_product(user_id, product_id)

        if existing:
            logger.info(
                f"Produkt {product_id} juz jest w koszyku {user_id}, zwiekszam ilosc "
                f"z {existing.quantity} do {existing.quantity + quantity}"
            )
            existing.quantity += quantity
            item = self.repo.save_cart_item(existing)
            return {"cart_item": _item_to_dict(item), "message": "Cart updated successfully"}

        logger.info(f"Dodaje nowy produkt {product_id} do koszyka {user_id}")
        item = self.repo.save_cart_item(
            CartItemModel(user_id=user_id, product_id=product_id, quantity=quantity)
        )
        return {"cart_item": _item_to_dict(item), "message": "Item added to cart"}

    def update_cart_item(self, user_id: str, cart_item_id: str, quantity: int) -> Dict[str, Any]:
        if quantity <= 0:
            raise CartError("Quantity must be greater than 0")

        item = self.repo.get_cart_item(cart_item_id)

        if not item or item.user_id != user_id:
            raise NotFoundError("Cart item not found")

        if item.product.track_quantity and item.product.quantity < quantity:
            raise CartError("Insufficient stock")

        logger.info(f"Pozycja {cart_item_id}: ilosc {item.quantity} -> {quantity}")
        item.quantity = quantity
        item = self.repo.save_cart_item(item)
        return {"cart_item": _item_to_dict(item), "message": "Cart item updated"}

    def remove_from_cart(self, user_id: str, cart_item_id: str) -> Dict[str, Any]:
        item = self.repo.get_cart_item(cart_item_id)

        if not item or item.user_id != user_id:
            raise NotFoundError("Cart item not found")

        self.repo.delete_cart_item(item)
        logger.info(f"Usunieto pozycje {cart_item_id} z koszyka {user_id}")
        return {"message": "Item removed from cart"}

    def clear_cart(self, user_id: str) -> Dict[str, Any]:
        removed = self.repo.clear_cart(user_id)
        logger.info(f"Wyczyszczono koszyk {user_id} ({removed} pozycji)")
        return {"message": "Cart cleared"}

    def sync_local_cart(self, user_id: str, store) -> CartSyncResult | None:
        """Scala koszyk lokalny (store) z koszykiem uzytkownika w tej samej sesji DB."""
        gateway = ServiceCartGateway(self, user_id)
        return CartSyncService(store=store, gateway=gateway).sync_cart()

