# storefront/services/order_service.py
import secrets
import string
import time
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Dict

from sqlalchemy.orm import Session

from storefront.data.models.order import (
    OrderModel,
    OrderItemModel,
    PaymentModel,
    OrderStatusHistoryModel,
)
from storefront.domain.enums import OrderStatus, PaymentStatus
from storefront.domain.errors import NotFoundError, OrderError
from storefront.domain.schemas import GuestOrderCreate
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services.notification_service import NotificationService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

#tolerancja zaokraglen kwot z bramki
AMOUNT_TOLERANCE = Decimal("0.01")

_ORDER_SUFFIX_ALPHABET = string.ascii_uppercase + string.digits


def generate_order_number() -> str:
    suffix = "".join(secrets.choice(_ORDER_SUFFIX_ALPHABET) for _ in range(9))
    return f"ORD-{int(time.time() * 1000)}-{suffix}"


def order_to_dict(order: OrderModel) -> Dict[str, Any]:
    return {
        "id": order.id,
        "order_number": order.order_number,
        "email": order.email,
        "first_name": order.first_name,
        "last_name": order.last_name,
        "status": order.status,
        "payment_status": order.payment_status,
        "payment_method": order.payment_method,
        "currency": order.currency,
        "subtotal": order.subtotal,
        "shipping_cost": order.shipping_cost,
        "tax": order.tax,
        "discount": order.discount,
        "total": order.total,
        "created_at": order.created_at,
        "items": [
            {
                "product_id": i.product_id,
                "product_name": i.product_name,
                "product_sku": i.product_sku,
                "price": i.price,
                "quantity": i.quantity,
                "total": i.total,
            }
            for i in order.items
        ],
    }


class OrderService:
    """
    Serwis odpowiedzialny za domenę zamówień.
    Separacja od CartService zgodnie z wymaganiami.
    """

    def __init__(self, db: Session, notification_service: NotificationService | None = None):
        self.db = db
        self.repo = OrderRepo(db)
        self.products = ProductRepo(db)
        self.notification_service = notification_service or NotificationService()

    def create_guest_order_with_payment(self, payload: GuestOrderCreate) -> Dict[str, Any]:
        """
        Use Case: zamowienie goscia po udanej platnosci.

        1. Platnosc musi miec status PAID
        2. Produkty istnieja i jest stan magazynowy
        3. Zaplacona kwota i sumy sie zgadzaja
        4. Tworzy zamowienie, pozycje, platnosc i historie statusow
        5. Zdejmuje stan magazynowy
        6. Wysyla potwierdzenie (async)
        """
        payment = payload.payment_response
        totals = payload.totals
        address = payload.address

        if payment.payment_status != "PAID":
            raise OrderError(f"Payment not completed. Status: {payment.payment_status}")

        product_ids = [line.product_id for line in payload.items]

        #jedna linia na produkt, stan sprawdzany i zdejmowany per linia
        if len(set(product_ids)) != len(product_ids):
            raise OrderError("Duplicate products in order")

        products = {p.id: p for p in self.products.get_products(product_ids)}

        if len(products) != len(product_ids):
            raise OrderError("Some products not found")

        for line in payload.items:
            product = products[line.product_id]
            if product.track_quantity and product.quantity < line.quantity:
                raise OrderError(f"Insufficient stock for {product.name}")

        expected_total = totals.total
        try:
            paid_amount = Decimal(payment.amount_paid) if payment.amount_paid else expected_total
        except InvalidOperation:
            raise OrderError(f"Invalid paid amount: {payment.amount_paid}")

        if not paid_amount.is_finite():
            raise OrderError(f"Invalid paid amount: {payment.amount_paid}")

        if abs(paid_amount - expected_total) > AMOUNT_TOLERANCE:
            raise OrderError(
                f"Payment amount mismatch. Expected: {expected_total}, Received: {paid_amount}"
            )

        if abs(totals.expected_total() - totals.total) > AMOUNT_TOLERANCE:
            raise OrderError(
                f"Order totals are inconsistent. Expected total: {totals.expected_total()}, "
                f"Received: {totals.total}"
            )

        order_number = generate_order_number()
        payment_method = payload.payment_method.value
        currency = payload.currency.value

        # Utwórz zamówienie (bez user_id dla goscia)
        order = OrderModel(
            order_number=order_number,
            email=address.email,
            first_name=address.first_name,
            last_name=address.last_name,
            phone=address.phone,
            address_1=address.address_1,
            address_2=address.address_2,
            city=address.city,
            state=address.state,
            postal_code=address.postal_code,
            country=address.country,
            payment_method=payment_method,
            currency=currency,
            notes=payload.notes,
            subtotal=totals.subtotal,
            shipping_cost=totals.shipping,
            tax=totals.tax,
            discount=totals.discount,
            total=totals.total,
            payment_status=PaymentStatus.COMPLETED.value,
            status=OrderStatus.PENDING.value,
        )

        for line in payload.items:
            product = products[line.product_id]
            order.items.append(
                OrderItemModel(
                    product_id=product.id,
                    product_name=product.name,
                    product_sku=product.sku,
                    price=product.price,
                    quantity=line.quantity,
                    total=product.price * line.quantity,
                )
            )

        order.payments.append(
            PaymentModel(
                payment_method=payment_method,
                status=PaymentStatus.COMPLETED.value,
                amount=totals.total,
                currency=currency,
                transaction_id=payment.transaction_reference,
                reference=payment.payment_reference,
                gateway_response=payment.model_dump(mode="json"),
                processed_at=datetime.now(timezone.utc),
            )
        )

        order.status_history.extend(
            [
                OrderStatusHistoryModel(status=OrderStatus.PENDING.value, notes="Guest order created"),
                OrderStatusHistoryModel(status=OrderStatus.PENDING.value, notes="Payment completed"),
            ]
        )

        try:
            self.repo.add_order(order)

            # Zdejmij stan magazynowy
            for line in payload.items:
                product = products[line.product_id]
                if product.track_quantity:
                    product.quantity -= line.quantity
                    product.reserved_quantity += line.quantity
                    product.sale_count += line.quantity

            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(
            f"Guest order {order_number} created, payment {payment.payment_reference}, total {totals.total}"
        )

        self.notification_service.send_order_confirmation(order_number, order.email, guest=True)

        return {
            "order": order_to_dict(order),
            "order_number": order.order_number,
            "message": "Guest order created successfully",
        }

    def get_order_by_number(self, order_number: str, email: str | None = None) -> Dict[str, Any]:
        """
        Use Case: sledzenie zamowienia po numerze (publiczne).
        """
        order = self.repo.get_order_by_number(order_number)

        if not order:
            raise NotFoundError("Order not found")

        if email is not None and order.email.lower() != email.lower():
            raise PermissionError("Email does not match order")

        return order_to_dict(order)
