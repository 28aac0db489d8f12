"""CatalogService — builds the read-only pricing inputs for one request.

Configuration gaps never block checkout:
  * no category/default shipping rate  -> RateCatalog falls back to a fixed fee
  * no surcharge rule row for a method -> built-in DEFAULT_SURCHARGE_RULES
Both are logged at WARNING so they stay distinguishable from configured pricing.
"""

import logging
from collections.abc import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.sf_catalog.domain.models import (
    DEFAULT_SURCHARGE_RULES,
    CategoryRate,
    PaymentSurchargeRule,
)
from src.sf_catalog.domain.rate_catalog import RateCatalog
from src.sf_catalog.domain.repository import CatalogRepositoryProtocol
from src.sf_catalog.infrastructure.persistence import CatalogRepository
from src.sf_common.errors import PaymentMethodDisabledError

logger = logging.getLogger(__name__)


class CatalogService:
    def __init__(
        self,
        repo: CatalogRepositoryProtocol | None = None,
        fallback_fee: int | None = None,
    ) -> None:
        self._repo: CatalogRepositoryProtocol = repo or CatalogRepository()
        self._fallback_fee = (
            fallback_fee if fallback_fee is not None else settings.FALLBACK_SHIPPING_FEE
        )

    async def get_rate_for_category(
        self, db: AsyncSession, category_id: str
    ) -> CategoryRate | None:
        rate = await self._repo.find_active_rate(db, category_id)
        if rate is None or not rate.is_active:
            return None
        return rate

    async def get_rates_for_categories(
        self, db: AsyncSession, category_ids: Iterable[str | None]
    ) -> dict[str, CategoryRate]:
        ids = {cid for cid in category_ids if cid is not None}
        rates = await self._repo.find_active_rates(db, ids)
        return {r.category_id: r for r in rates if r.category_id is not None and r.is_active}

    async def get_default_rate(self, db: AsyncSession) -> CategoryRate | None:
        rate = await self._repo.find_default_rate(db)
        if rate is None or not rate.is_active:
            return None
        return rate

    async def load_rate_catalog(
        self, db: AsyncSession, category_ids: Iterable[str | None]
    ) -> RateCatalog:
        rates = await self.get_rates_for_categories(db, category_ids)
        default_rate = await self.get_default_rate(db)
        if default_rate is None:
            logger.warning("No active default shipping rate configured")
        return RateCatalog(
            rates_by_category=rates,
            default_rate=default_rate,
            fallback_fee=self._fallback_fee,
        )

    async def get_surcharge_rule(
        self, db: AsyncSession, method: str
    ) -> PaymentSurchargeRule:
        """Return the rule for a payment method; disabled methods are rejected."""
        rule = await self._repo.find_surcharge_rule(db, method)
        if rule is None:
            rule = DEFAULT_SURCHARGE_RULES.get(method)
            if rule is None:
                raise PaymentMethodDisabledError(method)
            logger.warning(
                "No surcharge rule configured for %s, using built-in default", method
            )
        if not rule.is_enabled:
            raise PaymentMethodDisabledError(method)
        return rule
