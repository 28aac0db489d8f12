# src/sf_order/domain/repository.py
"""OrderRepository Protocol — interface contract for persistence layer."""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sf_order.domain.models import Order


class OrderRepositoryProtocol(Protocol):
    async def create_order(self, db: AsyncSession, order: Order) -> None:
        """Insert the order row and all of its lines."""
        ...

    async def find_order_by_id(
        self, db: AsyncSession, order_id: str, for_update: bool = False
    ) -> Order | None: ...

    async def update_order_status(self, db: AsyncSession, order: Order) -> bool:
        """Persist status + cancellation stamps.

        Returns False when the stored order was already CANCELLED (nothing written).
        """
        ...

    async def update_payment(self, db: AsyncSession, order: Order) -> None: ...

    async def list_orders(
        self,
        db: AsyncSession,
        customer_id: str | None,
        status: str | None,
        limit: int,
        cursor_id: str | None,
    ) -> list[Order]: ...
