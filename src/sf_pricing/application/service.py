"""QuoteService — prices a prospective cart without reserving anything.

Uses current product prices and the live rate catalog, exactly like order
placement, but takes no locks, checks no stock and writes nothing.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.sf_cart.domain.models import CartItem, merge_items
from src.sf_catalog.application.service import CatalogService
from src.sf_catalog.domain.repository import ProductRepositoryProtocol
from src.sf_catalog.infrastructure.persistence import ProductRepository
from src.sf_pricing.application.schemas import QuoteRequest, QuoteResponse
from src.sf_pricing.domain.cart_lines import to_cart_lines
from src.sf_pricing.domain.engine import price

logger = logging.getLogger(__name__)


class QuoteService:
    def __init__(
        self,
        product_repo: ProductRepositoryProtocol | None = None,
        catalog: CatalogService | None = None,
    ) -> None:
        self._products: ProductRepositoryProtocol = product_repo or ProductRepository()
        self._catalog = catalog or CatalogService()

    async def quote(self, db: AsyncSession, req: QuoteRequest) -> QuoteResponse:
        # Payment method is validated even for an empty cart.
        rule = await self._catalog.get_surcharge_rule(db, req.payment_method)
        if not req.items:
            return QuoteResponse.empty()

        items = merge_items(
            [CartItem(product_id=i.product_id, quantity=i.quantity) for i in req.items]
        )
        products = await self._products.find_products_by_ids(db, [i.product_id for i in items])
        lines = to_cart_lines(items, products)
        catalog = await self._catalog.load_rate_catalog(
            db, {line.category_id for line in lines if not line.is_digital}
        )
        pricing = price(lines, catalog, rule)
        if pricing.fallback_applied:
            logger.warning(
                "Fallback shipping fee quoted for categories %s", pricing.fallback_categories
            )
        return QuoteResponse.from_result(pricing)
