"""OrderApplicationService — customer-facing composition layer.

Combines the assembler, lifecycle manager and repositories with schema
transformations. State-changing calls delegate their transaction handling to
OrderAssembler / OrderLifecycleManager; reads run without an explicit transaction.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.sf_cart.domain.repository import CartRepositoryProtocol
from src.sf_cart.infrastructure.persistence import CartRepository
from src.sf_common.errors import OrderForbiddenError, OrderNotFoundError
from src.sf_order.application.assembler import OrderAssembler, PlaceOrderCommand
from src.sf_order.application.lifecycle import OrderLifecycleManager
from src.sf_order.application.schemas import (
    OrderListResponse,
    OrderResponse,
    PlaceOrderRequest,
    PlaceOrderResponse,
)
from src.sf_order.domain.models import Order
from src.sf_order.domain.repository import OrderRepositoryProtocol
from src.sf_order.domain.status import parse_status
from src.sf_order.infrastructure.persistence import OrderRepository

_MAX_ORDER_ID = 2**63 - 1  # BIGINT


def _valid_cursor(cursor: str | None) -> str | None:
    """Order ids are ASCII decimal BIGINTs; anything else restarts from the top."""
    if cursor is None or not (cursor.isascii() and cursor.isdigit()):
        return None
    return cursor if int(cursor) <= _MAX_ORDER_ID else None


async def load_order_page(
    repo: OrderRepositoryProtocol,
    db: AsyncSession,
    customer_id: str | None,
    status: str | None,
    limit: int,
    cursor: str | None,
) -> OrderListResponse:
    """Cursor page of orders, newest first; customer_id=None lists every customer."""
    status_value = parse_status(status).value if status else None
    cursor = _valid_cursor(cursor)
    # Fetch limit+1 to detect has_more without a COUNT(*) query
    orders = await repo.list_orders(db, customer_id, status_value, limit + 1, cursor)
    has_more = len(orders) > limit
    if has_more:
        orders = orders[:limit]
    return OrderListResponse(
        items=[OrderResponse.from_domain(o) for o in orders],
        next_cursor=orders[-1].id if has_more else None,
        has_more=has_more,
    )


class OrderApplicationService:
    def __init__(
        self,
        repo: OrderRepositoryProtocol | None = None,
        cart_repo: CartRepositoryProtocol | None = None,
        assembler: OrderAssembler | None = None,
        lifecycle: OrderLifecycleManager | None = None,
    ) -> None:
        self._repo: OrderRepositoryProtocol = repo or OrderRepository()
        self._cart: CartRepositoryProtocol = cart_repo or CartRepository()
        self._assembler = assembler or OrderAssembler(order_repo=self._repo, cart_repo=self._cart)
        self._lifecycle = lifecycle or OrderLifecycleManager(order_repo=self._repo)

    async def place_order_from_cart(
        self, db: AsyncSession, customer_id: str, req: PlaceOrderRequest
    ) -> PlaceOrderResponse:
        placed = await self._assembler.place_order(
            db,
            PlaceOrderCommand(
                customer_id=customer_id,
                items=None,
                shipping_address=req.shipping_address,
                recipient_name=req.recipient_name,
                payment_method=req.payment_method,
                contact_phone=req.contact_phone,
                notes=req.notes,
            ),
        )
        return PlaceOrderResponse.from_result(placed.order, placed.pricing)

    async def get_order(
        self, db: AsyncSession, order_id: str, customer_id: str
    ) -> OrderResponse:
        order = await self._get_owned(db, order_id, customer_id)
        return OrderResponse.from_domain(order)

    async def list_orders(
        self,
        db: AsyncSession,
        customer_id: str,
        status: str | None,
        limit: int,
        cursor: str | None,
    ) -> OrderListResponse:
        return await load_order_page(self._repo, db, customer_id, status, limit, cursor)

    async def cancel_order(
        self, db: AsyncSession, order_id: str, customer_id: str, reason: str | None
    ) -> OrderResponse:
        order = await self._lifecycle.cancel(db, order_id, customer_id, reason)
        return OrderResponse.from_domain(order)

    async def change_payment_method(
        self, db: AsyncSession, order_id: str, customer_id: str, payment_method: str
    ) -> OrderResponse:
        order = await self._lifecycle.change_payment_method(
            db, order_id, customer_id, payment_method
        )
        return OrderResponse.from_domain(order)

    async def _get_owned(self, db: AsyncSession, order_id: str, customer_id: str) -> Order:
        order = await self._repo.find_order_by_id(db, order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        if order.customer_id != customer_id:
            raise OrderForbiddenError(order_id)
        return order
