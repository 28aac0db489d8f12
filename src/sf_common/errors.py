"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/Principal
  3xxx: Product/Stock
  4xxx: Order
  5xxx: Payment
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth/Principal ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Invalid or expired token", 401)


class PermissionDeniedError(AppError):
    def __init__(self, detail: str = "Permission denied") -> None:
        super().__init__(1002, detail, 403)


# --- 3xxx: Product/Stock ---

class ProductUnavailableError(AppError):
    def __init__(self, product_id: str, name: str | None = None) -> None:
        label = name or product_id
        super().__init__(3001, f"Product is not available: {label}", 422)
        self.product_id = product_id


class InsufficientStockError(AppError):
    def __init__(self, product_id: str, requested: int, available: int) -> None:
        super().__init__(
            3002,
            f"Insufficient stock for product {product_id}: "
            f"requested {requested}, available {available}",
            409,
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


# --- 4xxx: Order ---

class EmptyCartError(AppError):
    def __init__(self) -> None:
        super().__init__(4001, "Cart is empty", 422)


class InvalidQuantityError(AppError):
    def __init__(self, product_id: str, quantity: int) -> None:
        super().__init__(
            4002, f"Quantity must be a positive integer: {product_id} x {quantity}", 422
        )


class OrderForbiddenError(AppError):
    def __init__(self, order_id: str) -> None:
        super().__init__(4003, f"Order {order_id} belongs to another customer", 403)


class OrderNotFoundError(AppError):
    def __init__(self, order_id: str) -> None:
        super().__init__(4004, f"Order not found: {order_id}", 404)


class AlreadyCancelledError(AppError):
    def __init__(self, order_id: str) -> None:
        super().__init__(4005, f"Order {order_id} is already cancelled", 409)


class OrderNotCancellableError(AppError):
    def __init__(self, order_id: str, status: str) -> None:
        super().__init__(4006, f"Order {order_id} in status {status} cannot be cancelled", 422)


class InvalidOrderStatusError(AppError):
    def __init__(self, status: str) -> None:
        super().__init__(4007, f"Invalid order status: {status}", 422)


class InvalidStatusTransitionError(AppError):
    def __init__(self, order_id: str, current: str, target: str) -> None:
        super().__init__(
            4008, f"Order {order_id} cannot move from {current} to {target}", 422
        )


class PaymentMethodLockedError(AppError):
    def __init__(self, order_id: str) -> None:
        super().__init__(
            4009, f"Payment method of order {order_id} can no longer be changed", 422
        )


# --- 5xxx: Payment ---

class PaymentMethodDisabledError(AppError):
    def __init__(self, method: str) -> None:
        super().__init__(5001, f"Payment method is not available: {method}", 422)


# --- 9xxx: System ---

class RateLimitError(AppError):
    def __init__(self) -> None:
        super().__init__(9001, "Rate limit exceeded", 429)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class TransactionFailedError(AppError):
    """Storage-layer abort (deadlock, serialization failure, timeout).

    Nothing was written; the caller may retry the whole request.
    """

    def __init__(self, detail: str = "Transaction failed, please retry") -> None:
        super().__init__(9003, detail, 503)
