# src/sf_cart/domain/repository.py
"""CartRepository Protocol — interface contract for persistence layer."""
from collections.abc import Iterable
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sf_cart.domain.models import CartItem


class CartRepositoryProtocol(Protocol):
    async def list_items(
        self, db: AsyncSession, customer_id: str, for_update: bool = False
    ) -> list[CartItem]: ...

    async def remove_items(
        self, db: AsyncSession, customer_id: str, product_ids: Iterable[str]
    ) -> int: ...
