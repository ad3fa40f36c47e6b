# storefront/domain/cart.py
"""Typy koszyka wspoldzielone przez magazyn lokalny, reconciler i orkiestrator sync."""
from decimal import Decimal
from typing import List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class LocalCartItem(BaseModel):
    """Pozycja koszyka anonimowego (bez metadanych produktu)."""

    product_id: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0)


class ProductSummary(BaseModel):
    id: str
    name: str
    price: Decimal

    model_config = ConfigDict(from_attributes=True)


class ServerCartItem(BaseModel):
    """Pozycja koszyka zalogowanego uzytkownika, tylko do odczytu dla reconcilera."""

    cart_item_id: str = Field(validation_alias=AliasChoices("cart_item_id", "id"))
    product_id: str
    quantity: int = Field(..., gt=0)
    product: ProductSummary

    model_config = ConfigDict(populate_by_name=True)


class CartItemUpdate(BaseModel):
    cart_item_id: str
    product_id: str
    quantity: int


class QuantityConflict(BaseModel):
    product_id: str
    local_qty: int
    db_qty: int
    final_qty: int
    product_name: str


class ReconciliationPlan(BaseModel):
    to_add: List[LocalCartItem] = Field(default_factory=list)
    to_update: List[CartItemUpdate] = Field(default_factory=list)
    conflicts: List[QuantityConflict] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.to_add and not self.to_update


class CartSyncResult(BaseModel):
    merged_count: int
    added_count: int
    conflict_count: int
    merged_products: List[str]
