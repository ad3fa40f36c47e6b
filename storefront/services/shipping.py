# storefront/services/shipping.py
"""Koszt wysylki wg stanu i wagi, darmowa wysylka od progu, sumy zamowienia."""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List

from sqlalchemy.orm import Session

from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import OrderLineIn, OrderTotals
from storefront.repos.product_repo import ProductRepo

FREE_SHIPPING_THRESHOLD = Decimal("50000")  # NGN

STATE_SHIPPING_COSTS: Dict[str, int] = {
    "Lagos": 3000,
    "Abuja": 3500,
    "Rivers": 4000,
    "Kano": 4500,
    "Ogun": 3500,
    "Delta": 4000,
    "Kaduna": 4500,
    "Oyo": 4000,
    "Edo": 4000,
    "Enugu": 4500,
}
DEFAULT_SHIPPING_COST = 5000

#(maks. waga kg, mnoznik); powyzej ostatniego progu 2.5
WEIGHT_MULTIPLIERS = [
    (Decimal("1"), Decimal("1.0")),
    (Decimal("3"), Decimal("1.3")),
    (Decimal("5"), Decimal("1.6")),
    (Decimal("10"), Decimal("2.0")),
]
HEAVY_MULTIPLIER = Decimal("2.5")

DELIVERY_DAYS: Dict[str, int] = {
    "Lagos": 1,
    "Abuja": 2,
    "Rivers": 2,
    "Kano": 3,
    "Ogun": 2,
    "Delta": 2,
    "Kaduna": 3,
    "Oyo": 2,
    "Edo": 2,
    "Enugu": 3,
}
DEFAULT_DELIVERY_DAYS = 3


@dataclass(frozen=True)
class ShippingQuote:
    cost: Decimal
    is_free: bool
    estimated_days: int
    method: str  # standard | express

    @property
    def label(self) -> str:
        unit = "day" if self.estimated_days == 1 else "days"
        return f"{self.method.capitalize()} Delivery ({self.estimated_days} {unit})"


def _weight_multiplier(weight: Decimal) -> Decimal:
    for max_weight, multiplier in WEIGHT_MULTIPLIERS:
        if weight <= max_weight:
            return multiplier
    return HEAVY_MULTIPLIER


def calculate_shipping(subtotal, weight=0, state: str | None = None) -> ShippingQuote:
    subtotal = Decimal(str(subtotal))
    weight = Decimal(str(weight))
    days = DELIVERY_DAYS.get(state or "", DEFAULT_DELIVERY_DAYS)

    if subtotal >= FREE_SHIPPING_THRESHOLD:
        return ShippingQuote(cost=Decimal("0"), is_free=True, estimated_days=days, method="standard")

    base = Decimal(STATE_SHIPPING_COSTS.get(state or "", DEFAULT_SHIPPING_COST))
    cost = (base * _weight_multiplier(weight)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)

    return ShippingQuote(cost=cost, is_free=False, estimated_days=days, method="standard")


def calculate_express_shipping(subtotal, weight=0, state: str | None = None) -> ShippingQuote:
    standard = calculate_shipping(subtotal, weight, state)

    if standard.is_free:
        return standard

    return ShippingQuote(
        cost=standard.cost * 2,
        is_free=False,
        estimated_days=max(1, standard.estimated_days - 1),
        method="express",
    )


def available_shipping_methods(subtotal, weight=0, state: str | None = None) -> List[ShippingQuote]:
    return [
        calculate_shipping(subtotal, weight, state),
        calculate_express_shipping(subtotal, weight, state),
    ]


def format_shipping_cost(cost) -> str:
    cost = Decimal(str(cost))
    if cost == 0:
        return "Free"
    return f"₦{cost:,.0f}"


def build_totals(subtotal, shipping, tax=0, discount=0) -> OrderTotals:
    subtotal = Decimal(str(subtotal))
    shipping = Decimal(str(shipping))
    tax = Decimal(str(tax))
    discount = Decimal(str(discount))
    return OrderTotals(
        subtotal=subtotal,
        shipping=shipping,
        tax=tax,
        discount=discount,
        total=subtotal + shipping + tax - discount,
    )


class ShippingService:
    """Wycena wysylki dla linii zamowienia na podstawie cen i wag z katalogu."""

    def __init__(self, db: Session):
        self.products = ProductRepo(db)

    def quote(self, items: Iterable[OrderLineIn], state: str | None = None) -> Dict[str, Any]:
        lines = list(items)
        products = {p.id: p for p in self.products.get_products(line.product_id for line in lines)}

        missing = [line.product_id for line in lines if line.product_id not in products]
        if missing:
            raise NotFoundError(f"Products not found: {', '.join(missing)}")

        subtotal = Decimal("0")
        weight = Decimal("0")
        for line in lines:
            product = products[line.product_id]
            subtotal += product.price * line.quantity
            weight += (product.weight_kg or 0) * line.quantity

        methods = available_shipping_methods(subtotal, weight, state)

        return {
            "subtotal": subtotal,
            "weight_kg": weight,
            "methods": [
                {
                    "method": q.method,
                    "label": q.label,
                    "cost": q.cost,
                    "display_cost": format_shipping_cost(q.cost),
                    "is_free": q.is_free,
                    "estimated_days": q.estimated_days,
                }
                for q in methods
            ],
            #standardowa wysylka jako domyslna przy checkout
            "totals": build_totals(subtotal, methods[0].cost),
        }
