"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    BACKORDERED = "BACKORDERED"
    SHIPPED = "SHIPPED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class CancelledBy(str, Enum):
    CUSTOMER = "CUSTOMER"
    ADMIN = "ADMIN"


class PaymentMethod(str, Enum):
    CARD = "card"
    BANK_TRANSFER = "bank_transfer"
    CASH_ON_DELIVERY = "cash_on_delivery"


class FeeModel(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class FeeBearer(str, Enum):
    CUSTOMER = "customer"
    MERCHANT = "merchant"


class RateSource(str, Enum):
    """Where a category group's shipping rate came from."""
    CATEGORY = "CATEGORY"
    DEFAULT = "DEFAULT"
    FALLBACK = "FALLBACK"


class UserType(str, Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


class AdminRole(str, Enum):
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    OPERATOR = "OPERATOR"
    VIEWER = "VIEWER"
