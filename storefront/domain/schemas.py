# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, EmailStr
from typing import List
from decimal import Decimal
from datetime import datetime

from storefront.domain.cart import LocalCartItem, ProductSummary, CartSyncResult
from storefront.domain.enums import Currency, PaymentMethod


class ItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: str = Field(..., min_length=1, description="ID produktu")
    quantity: int = Field(1, gt=0, description="Ilość produktu (musi być > 0)")


class QuantityIn(BaseModel):
    """Schema dla zmiany ilosci pozycji koszyka."""

    quantity: int = Field(..., gt=0)


class LocalQuantityIn(BaseModel):
    """Zmiana ilosci w koszyku goscia, 0 lub mniej usuwa pozycje."""

    quantity: int


class CartItemOut(BaseModel):
    id: str
    product_id: str
    quantity: int
    product: ProductSummary

    model_config = ConfigDict(from_attributes=True)


class CartOut(BaseModel):
    items: List[CartItemOut]
    total: Decimal
    count: int


class LocalCartIn(BaseModel):
    """Koszyk z localStorage / pliku klienta do scalenia po zalogowaniu."""

    items: List[LocalCartItem]


class LocalCartOut(BaseModel):
    guest_id: str
    items: List[LocalCartItem]
    count: int


class SyncOut(BaseModel):
    synced: bool
    result: CartSyncResult | None = None
    message: str | None = None


class UserCreate(BaseModel):
    id: str | None = Field(None, min_length=1, max_length=32)
    name: str = Field(..., min_length=1, max_length=100, description="Imię użytkownika")
    email: EmailStr | None = None


class UserRead(BaseModel):
    id: str
    name: str
    email: str | None = None

    model_config = ConfigDict(from_attributes=True)


class ProductOut(BaseModel):
    id: str
    name: str
    sku: str | None = None
    price: Decimal
    status: str
    track_quantity: bool
    quantity: int

    model_config = ConfigDict(from_attributes=True)


class PaymentConfirmation(BaseModel):
    """Odpowiedz bramki platnosci przekazana przez klienta po udanej platnosci."""

    payment_status: str
    transaction_reference: str | None = None
    payment_reference: str = Field(..., min_length=1)
    amount_paid: str | None = None
    payment_description: str | None = None
    customer_email: EmailStr
    customer_name: str


class ShippingAddress(BaseModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str | None = None
    address_1: str = Field(..., min_length=1)
    address_2: str | None = None
    city: str = Field(..., min_length=1)
    state: str | None = None
    postal_code: str | None = None
    country: str = "Nigeria"


class OrderLineIn(BaseModel):
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0)


class OrderTotals(BaseModel):
    subtotal: Decimal
    shipping: Decimal
    tax: Decimal
    discount: Decimal = Decimal("0")
    total: Decimal

    def expected_total(self) -> Decimal:
        return self.subtotal + self.shipping + self.tax - self.discount


class GuestOrderCreate(BaseModel):
    """Payload zamowienia bez konta uzytkownika."""

    payment_response: PaymentConfirmation
    address: ShippingAddress
    items: List[OrderLineIn] = Field(..., min_length=1)
    totals: OrderTotals
    payment_method: PaymentMethod = PaymentMethod.WALLET
    currency: Currency = Currency.NGN
    notes: str | None = None
    promo_code: str | None = None


class OrderItemOut(BaseModel):
    product_id: str
    product_name: str
    product_sku: str | None = None
    price: Decimal
    quantity: int
    total: Decimal

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    id: str
    order_number: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    status: str
    payment_status: str
    payment_method: str
    currency: str
    subtotal: Decimal
    shipping_cost: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal
    created_at: datetime
    items: List[OrderItemOut]

    model_config = ConfigDict(from_attributes=True)


class GuestOrderOut(BaseModel):
    order: OrderOut
    order_number: str
    message: str


class ShippingQuoteIn(BaseModel):
    items: List[OrderLineIn] = Field(..., min_length=1)
    state: str | None = None


class ShippingMethodOut(BaseModel):
    method: str
    label: str
    cost: Decimal
    display_cost: str
    is_free: bool
    estimated_days: int


class ShippingQuoteOut(BaseModel):
    subtotal: Decimal
    weight_kg: Decimal
    methods: List[ShippingMethodOut]
    totals: OrderTotals
