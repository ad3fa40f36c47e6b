# storefront/services/guest_checkout.py
"""Skladanie zamowienia goscia po udanej platnosci i przekazanie go do tworzenia."""
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Protocol

from storefront.domain.cart import LocalCartItem
from storefront.domain.enums import Currency, PaymentMethod
from storefront.domain.errors import GuestOrderError
from storefront.domain.schemas import (
    GuestOrderCreate,
    OrderLineIn,
    OrderTotals,
    PaymentConfirmation,
    ShippingAddress,
)
from storefront.services.local_cart import LocalCartStore
from storefront.services.notification_service import order_confirmation_url
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_OPTIONAL_ADDRESS_FIELDS = ("phone", "address_2", "state", "postal_code")


@dataclass(frozen=True)
class GuestCheckoutDefaults:
    payment_method: PaymentMethod = PaymentMethod.WALLET
    currency: Currency = Currency.NGN
    country: str = "Nigeria"


@dataclass(frozen=True)
class GuestOrderResult:
    order_number: str
    email: str
    confirmation_url: str


class OrderGateway(Protocol):
    def create_guest_order(self, payload: GuestOrderCreate) -> Dict[str, Any]: ...


class ServiceOrderGateway:
    """Gateway w procesie, nad OrderService."""

    def __init__(self, order_service):
        self.order_service = order_service

    def create_guest_order(self, payload: GuestOrderCreate) -> Dict[str, Any]:
        return self.order_service.create_guest_order_with_payment(payload)


def _address_payload(address, defaults: GuestCheckoutDefaults) -> Dict[str, Any]:
    data = dict(address.model_dump() if isinstance(address, ShippingAddress) else address)
    for field in _OPTIONAL_ADDRESS_FIELDS:
        if not data.get(field):
            data[field] = None
    if not data.get("country"):
        data["country"] = defaults.country
    return data


def assemble_guest_order(
    payment: PaymentConfirmation | Mapping[str, Any],
    address: ShippingAddress | Mapping[str, Any],
    items: Iterable[LocalCartItem | OrderLineIn | Mapping[str, Any]],
    totals: OrderTotals | Mapping[str, Any],
    payment_method: PaymentMethod | None = None,
    currency: Currency | None = None,
    notes: str | None = None,
    promo_code: str | None = None,
    defaults: GuestCheckoutDefaults = GuestCheckoutDefaults(),
) -> GuestOrderCreate:
    """Buduje payload zamowienia goscia; puste pola opcjonalne -> None, brakujace -> domyslne."""
    lines = [
        OrderLineIn.model_validate(i.model_dump() if hasattr(i, "model_dump") else i)
        for i in items
    ]
    totals_data = totals.model_dump() if isinstance(totals, OrderTotals) else dict(totals)
    if totals_data.get("discount") is None:
        totals_data["discount"] = 0

    return GuestOrderCreate(
        payment_response=PaymentConfirmation.model_validate(
            payment.model_dump() if isinstance(payment, PaymentConfirmation) else payment
        ),
        address=ShippingAddress.model_validate(_address_payload(address, defaults)),
        items=lines,
        totals=OrderTotals.model_validate(totals_data),
        payment_method=payment_method or defaults.payment_method,
        currency=currency or defaults.currency,
        notes=notes or None,
        promo_code=promo_code or None,
    )


def _payment_reference(payment) -> str | None:
    if isinstance(payment, PaymentConfirmation):
        return payment.payment_reference
    return (payment or {}).get("payment_reference")


class GuestCheckout:
    """
    Zamowienie goscia:
    -sukces: czysci koszyk lokalny, zwraca numer zamowienia do sledzenia
    -blad: koszyk lokalny zostaje, blad niesie referencje platnosci (klient juz zaplacil)
    """

    def __init__(
        self,
        store: LocalCartStore,
        gateway: OrderGateway,
        defaults: GuestCheckoutDefaults = GuestCheckoutDefaults(),
    ):
        self.store = store
        self.gateway = gateway
        self.defaults = defaults

    def create_guest_order(self, payment, address, totals, items=None, **options) -> GuestOrderResult:
        #platnosc juz przeszla, kazdy blad od tego miejsca musi niesc jej referencje
        reference = _payment_reference(payment)

        try:
            if items is None:
                items = self.store.get()

            payload = assemble_guest_order(
                payment, address, items, totals, defaults=self.defaults, **options
            )
            response = self.gateway.create_guest_order(payload)

            order_number = response["order_number"]
            email = (response.get("order") or {}).get("email") or payload.address.email
        except Exception as e:
            logger.error(f"Guest order creation error (payment {reference}): {e}")
            raise GuestOrderError(
                f"Failed to create order: {e}. Please contact support with payment reference {reference}.",
                payment_reference=reference,
            ) from e

        self.store.clear()
        logger.info(f"Guest order {order_number} placed, local cart cleared")

        return GuestOrderResult(
            order_number=order_number,
            email=email,
            confirmation_url=order_confirmation_url(order_number, email),
        )
