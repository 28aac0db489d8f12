"""Catalog and product repositories — raw text() SQL (no ORM).

Stock mutations use atomic conditional UPDATE ... RETURNING.
A result of 0 rows from decrement means the stock would go negative.

Transaction ownership: The CALLER (application service) is responsible for
committing or rolling back the session.
"""

from collections.abc import Iterable
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sf_catalog.domain.models import CategoryRate, PaymentSurchargeRule, Product
from src.sf_common.errors import InternalError

# ---------------------------------------------------------------------------
# SQL: shipping rates / surcharge rules
# ---------------------------------------------------------------------------

_FIND_ACTIVE_RATE_SQL = text("""
    SELECT category_id, fee_per_order, free_shipping_threshold, is_active
    FROM shipping_rates
    WHERE is_active = TRUE AND category_id = :category_id
""")

_FIND_ACTIVE_RATES_SQL = text("""
    SELECT category_id, fee_per_order, free_shipping_threshold, is_active
    FROM shipping_rates
    WHERE is_active = TRUE
      AND category_id = ANY(CAST(:category_ids AS TEXT[]))
""")

_FIND_DEFAULT_RATE_SQL = text("""
    SELECT category_id, fee_per_order, free_shipping_threshold, is_active
    FROM shipping_rates
    WHERE is_active = TRUE AND category_id IS NULL
    LIMIT 1
""")

_FIND_SURCHARGE_RULE_SQL = text("""
    SELECT method, fee_model, rate_bps, fixed_amount, bearer, is_enabled
    FROM payment_surcharge_rules
    WHERE method = :method
""")

# ---------------------------------------------------------------------------
# SQL: products
# ---------------------------------------------------------------------------

_PRODUCT_COLUMNS = """
    p.id, p.name, p.price, p.stock, p.category_id, p.is_active,
    COALESCE(c.category_type = 'DIGITAL', FALSE) AS is_digital
"""

_FIND_PRODUCTS_SQL = text(f"""
    SELECT {_PRODUCT_COLUMNS}
    FROM products p
    LEFT JOIN categories c ON c.id = p.category_id
    WHERE p.id = ANY(CAST(:product_ids AS TEXT[]))
    ORDER BY p.id
""")

# Rows are locked in id order so concurrent placements never deadlock
# on lock ordering.
_FIND_PRODUCTS_FOR_UPDATE_SQL = text(f"""
    SELECT {_PRODUCT_COLUMNS}
    FROM products p
    LEFT JOIN categories c ON c.id = p.category_id
    WHERE p.id = ANY(CAST(:product_ids AS TEXT[]))
    ORDER BY p.id
    FOR UPDATE OF p
""")

_DECREMENT_STOCK_SQL = text("""
    UPDATE products
    SET stock = stock - :quantity, updated_at = NOW()
    WHERE id = :product_id AND stock >= :quantity
    RETURNING stock
""")

_INCREMENT_STOCK_SQL = text("""
    UPDATE products
    SET stock = stock + :quantity, updated_at = NOW()
    WHERE id = :product_id
    RETURNING stock
""")


# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------

def _row_to_rate(row: Any) -> CategoryRate:
    return CategoryRate(
        category_id=row.category_id,
        fee_per_order=row.fee_per_order,
        free_shipping_threshold=row.free_shipping_threshold,
        is_active=row.is_active,
    )


def _row_to_rule(row: Any) -> PaymentSurchargeRule:
    return PaymentSurchargeRule(
        method=row.method,
        fee_model=row.fee_model,
        rate_bps=row.rate_bps,
        fixed_amount=row.fixed_amount,
        bearer=row.bearer,
        is_enabled=row.is_enabled,
    )


def _row_to_product(row: Any) -> Product:
    return Product(
        id=row.id,
        name=row.name,
        price=row.price,
        stock=row.stock,
        category_id=row.category_id,
        is_active=row.is_active,
        is_digital=bool(row.is_digital),
    )


# ---------------------------------------------------------------------------
# Repositories
# ---------------------------------------------------------------------------

class CatalogRepository:
    """Read-only access to shipping rates and payment surcharge rules."""

    async def find_active_rate(
        self, db: AsyncSession, category_id: str
    ) -> CategoryRate | None:
        result = await db.execute(_FIND_ACTIVE_RATE_SQL, {"category_id": category_id})
        row = result.fetchone()
        return _row_to_rate(row) if row else None

    async def find_active_rates(
        self, db: AsyncSession, category_ids: Iterable[str]
    ) -> list[CategoryRate]:
        ids = sorted(set(category_ids))
        if not ids:
            return []
        result = await db.execute(_FIND_ACTIVE_RATES_SQL, {"category_ids": ids})
        return [_row_to_rate(row) for row in result.fetchall()]

    async def find_default_rate(self, db: AsyncSession) -> CategoryRate | None:
        result = await db.execute(_FIND_DEFAULT_RATE_SQL)
        row = result.fetchone()
        return _row_to_rate(row) if row else None

    async def find_surcharge_rule(
        self, db: AsyncSession, method: str
    ) -> PaymentSurchargeRule | None:
        result = await db.execute(_FIND_SURCHARGE_RULE_SQL, {"method": method})
        row = result.fetchone()
        return _row_to_rule(row) if row else None


class ProductRepository:
    """Product lookup and stock mutation."""

    async def find_products_by_ids(
        self, db: AsyncSession, product_ids: Iterable[str], for_update: bool = False
    ) -> list[Product]:
        ids = sorted(set(product_ids))
        if not ids:
            return []
        sql = _FIND_PRODUCTS_FOR_UPDATE_SQL if for_update else _FIND_PRODUCTS_SQL
        result = await db.execute(sql, {"product_ids": ids})
        return [_row_to_product(row) for row in result.fetchall()]

    async def decrement_stock(
        self, db: AsyncSession, product_id: str, quantity: int
    ) -> int | None:
        """Return the new stock, or None if stock < quantity (nothing changed)."""
        result = await db.execute(
            _DECREMENT_STOCK_SQL, {"product_id": product_id, "quantity": quantity}
        )
        row = result.fetchone()
        return row.stock if row else None

    async def increment_stock(
        self, db: AsyncSession, product_id: str, quantity: int
    ) -> int:
        result = await db.execute(
            _INCREMENT_STOCK_SQL, {"product_id": product_id, "quantity": quantity}
        )
        row = result.fetchone()
        if row is None:
            raise InternalError(f"Product not found while restoring stock: {product_id}")
        return int(row.stock)
