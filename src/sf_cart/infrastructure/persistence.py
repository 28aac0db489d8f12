# src/sf_cart/infrastructure/persistence.py
"""CartRepository — raw SQL persistence implementation."""
from collections.abc import Iterable

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sf_cart.domain.models import CartItem

_LIST_ITEMS_SQL = text("""
    SELECT product_id, quantity
    FROM cart_items
    WHERE customer_id = :customer_id
    ORDER BY created_at ASC, product_id ASC
""")

_LIST_ITEMS_FOR_UPDATE_SQL = text("""
    SELECT product_id, quantity
    FROM cart_items
    WHERE customer_id = :customer_id
    ORDER BY created_at ASC, product_id ASC
    FOR UPDATE
""")

_REMOVE_ITEMS_SQL = text("""
    DELETE FROM cart_items
    WHERE customer_id = :customer_id
      AND product_id = ANY(CAST(:product_ids AS TEXT[]))
""")


class CartRepository:
    async def list_items(
        self, db: AsyncSession, customer_id: str, for_update: bool = False
    ) -> list[CartItem]:
        sql = _LIST_ITEMS_FOR_UPDATE_SQL if for_update else _LIST_ITEMS_SQL
        result = await db.execute(sql, {"customer_id": customer_id})
        return [
            CartItem(product_id=row.product_id, quantity=row.quantity)
            for row in result.fetchall()
        ]

    async def remove_items(
        self, db: AsyncSession, customer_id: str, product_ids: Iterable[str]
    ) -> int:
        """Delete the given products from the customer's cart; returns the number removed.

        Rows for other products stay, so an item added while an order was
        being placed is not lost.
        """
        result = await db.execute(
            _REMOVE_ITEMS_SQL,
            {"customer_id": customer_id, "product_ids": list(product_ids)},
        )
        return int(result.rowcount or 0)
