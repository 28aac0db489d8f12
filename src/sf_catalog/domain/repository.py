# src/sf_catalog/domain/repository.py
"""Repository Protocols — dependency inversion for testability.

Unit tests inject a mock that conforms to these Protocols.
Infrastructure layer provides the real implementation.
"""

from collections.abc import Iterable
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sf_catalog.domain.models import CategoryRate, PaymentSurchargeRule, Product


class CatalogRepositoryProtocol(Protocol):
    async def find_active_rate(
        self, db: AsyncSession, category_id: str
    ) -> CategoryRate | None: ...

    async def find_active_rates(
        self, db: AsyncSession, category_ids: Iterable[str]
    ) -> list[CategoryRate]: ...

    async def find_default_rate(self, db: AsyncSession) -> CategoryRate | None: ...

    async def find_surcharge_rule(
        self, db: AsyncSession, method: str
    ) -> PaymentSurchargeRule | None: ...


class ProductRepositoryProtocol(Protocol):
    async def find_products_by_ids(
        self, db: AsyncSession, product_ids: Iterable[str], for_update: bool = False
    ) -> list[Product]: ...

    async def decrement_stock(
        self, db: AsyncSession, product_id: str, quantity: int
    ) -> int | None: ...

    async def increment_stock(
        self, db: AsyncSession, product_id: str, quantity: int
    ) -> int: ...
