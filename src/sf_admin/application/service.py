# src/sf_admin/application/service.py
"""Admin order service — listing, status changes and the paid stamp."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.sf_common.errors import OrderNotFoundError
from src.sf_order.application.lifecycle import OrderLifecycleManager
from src.sf_order.application.schemas import OrderListResponse, OrderResponse
from src.sf_order.application.service import load_order_page
from src.sf_order.domain.repository import OrderRepositoryProtocol
from src.sf_order.infrastructure.persistence import OrderRepository


class AdminOrderService:
    def __init__(
        self,
        repo: OrderRepositoryProtocol | None = None,
        lifecycle: OrderLifecycleManager | None = None,
    ) -> None:
        self._repo: OrderRepositoryProtocol = repo or OrderRepository()
        self._lifecycle = lifecycle or OrderLifecycleManager(order_repo=self._repo)

    async def list_orders(
        self,
        db: AsyncSession,
        status: str | None,
        customer_id: str | None,
        limit: int,
        cursor: str | None,
    ) -> OrderListResponse:
        return await load_order_page(self._repo, db, customer_id, status, limit, cursor)

    async def get_order(self, db: AsyncSession, order_id: str) -> OrderResponse:
        order = await self._repo.find_order_by_id(db, order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return OrderResponse.from_domain(order)

    async def set_status(
        self,
        db: AsyncSession,
        order_id: str,
        status: str,
        cancel_reason: str | None = None,
    ) -> OrderResponse:
        order = await self._lifecycle.set_status(db, order_id, status, cancel_reason)
        return OrderResponse.from_domain(order)

    async def mark_paid(self, db: AsyncSession, order_id: str) -> OrderResponse:
        order = await self._lifecycle.mark_paid(db, order_id)
        return OrderResponse.from_domain(order)
