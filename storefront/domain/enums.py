# storefront/domain/enums.py
from enum import Enum


class PaymentMethod(str, Enum):
    WALLET = "WALLET"
    CARD = "CARD"
    BANK_TRANSFER = "BANK_TRANSFER"
    USSD = "USSD"


class Currency(str, Enum):
    NGN = "NGN"
    USD = "USD"


class ProductStatus(str, Enum):
    ACTIVE = "ACTIVE"
    DRAFT = "DRAFT"
    ARCHIVED = "ARCHIVED"


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"
