import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric, JSON
from sqlalchemy.orm import relationship

from storefront.data.database import Base


def _uuid():
    return uuid.uuid4().hex


def _now():
    return datetime.now(timezone.utc)


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(String(32), primary_key=True, default=_uuid)
    order_number = Column(String, nullable=False, unique=True, index=True)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=True)  # NULL dla zamowien goscia

    email = Column(String, nullable=False)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    phone = Column(String, nullable=True)

    address_1 = Column(String, nullable=True)
    address_2 = Column(String, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    postal_code = Column(String, nullable=True)
    country = Column(String, nullable=True)

    payment_method = Column(String, nullable=False)
    currency = Column(String, nullable=False)
    notes = Column(String, nullable=True)

    subtotal = Column(Numeric(12, 2), nullable=False)
    shipping_cost = Column(Numeric(12, 2), nullable=False, default=0)
    tax = Column(Numeric(12, 2), nullable=False, default=0)
    discount = Column(Numeric(12, 2), nullable=False, default=0)
    total = Column(Numeric(12, 2), nullable=False)

    payment_status = Column(String, nullable=False, default="PENDING")
    status = Column(String, nullable=False, default="PENDING")  # PENDING, PROCESSING, SHIPPED, DELIVERED, CANCELLED
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)

    items = relationship("OrderItemModel", back_populates="order", cascade="all, delete-orphan")
    payments = relationship("PaymentModel", back_populates="order", cascade="all, delete-orphan")
    status_history = relationship(
        "OrderStatusHistoryModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderStatusHistoryModel.id",
    )


class OrderItemModel(Base):
    __tablename__ = "order_items"

    id = Column(String(32), primary_key=True, default=_uuid)
    order_id = Column(String(32), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(String(32), ForeignKey("products.id"), nullable=False)

    #snapshot produktu w chwili zakupu
    product_name = Column(String, nullable=False)
    product_sku = Column(String, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    quantity = Column(Integer, nullable=False)
    total = Column(Numeric(12, 2), nullable=False)

    order = relationship("OrderModel", back_populates="items")


class PaymentModel(Base):
    __tablename__ = "payments"

    id = Column(String(32), primary_key=True, default=_uuid)
    order_id = Column(String(32), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)

    payment_method = Column(String, nullable=False)
    status = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(String, nullable=False)
    transaction_id = Column(String, nullable=True)
    reference = Column(String, nullable=False)
    gateway_response = Column(JSON, nullable=True)
    processed_at = Column(DateTime(timezone=True), nullable=True)

    order = relationship("OrderModel", back_populates="payments")


class OrderStatusHistoryModel(Base):
    __tablename__ = "order_status_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(String(32), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    status = Column(String, nullable=False)
    notes = Column(String, nullable=True)
    created_by = Column(String, nullable=False, default="system")
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)

    order = relationship("OrderModel", back_populates="status_history")
