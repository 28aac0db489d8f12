# src/sf_order/infrastructure/persistence.py
"""OrderRepository — raw SQL persistence implementation."""
from collections import defaultdict
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sf_order.domain.models import Order, OrderLine

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

ORDER_NUMBER_CONSTRAINT = "uq_orders_order_number"

_INSERT_ORDER_SQL = text("""
    INSERT INTO orders (id, order_number, customer_id, payment_method,
        subtotal_amount, shipping_fee, surcharge_amount, total_amount,
        shipping_address, recipient_name, contact_phone, notes, status)
    VALUES (:id, :order_number, :customer_id, :payment_method,
        :subtotal_amount, :shipping_fee, :surcharge_amount, :total_amount,
        :shipping_address, :recipient_name, :contact_phone, :notes, :status)
    RETURNING created_at, updated_at
""")

_INSERT_LINE_SQL = text("""
    INSERT INTO order_lines (id, order_id, product_id, product_name,
        unit_price, quantity, line_subtotal)
    VALUES (:id, :order_id, :product_id, :product_name,
        :unit_price, :quantity, :line_subtotal)
""")

# Conditional on the stored status so a cancelled order is never rewritten.
_UPDATE_STATUS_SQL = text("""
    UPDATE orders
    SET status = :status,
        cancelled_at = :cancelled_at,
        cancelled_by = :cancelled_by,
        cancel_reason = :cancel_reason,
        updated_at = NOW()
    WHERE id = :id AND status <> 'CANCELLED'
    RETURNING updated_at
""")

_UPDATE_PAYMENT_SQL = text("""
    UPDATE orders
    SET payment_method = :payment_method,
        surcharge_amount = :surcharge_amount,
        total_amount = :total_amount,
        paid_at = :paid_at,
        updated_at = NOW()
    WHERE id = :id
""")

_SELECT_COLUMNS = """
    id, order_number, customer_id, payment_method,
    subtotal_amount, shipping_fee, surcharge_amount, total_amount,
    shipping_address, recipient_name, contact_phone, notes, status,
    created_at, updated_at, paid_at, cancelled_at, cancelled_by, cancel_reason
"""

_GET_ORDER_BY_ID_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM orders WHERE id = :id
""")

_GET_ORDER_BY_ID_FOR_UPDATE_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM orders WHERE id = :id
    FOR UPDATE
""")

_LIST_ORDERS_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM orders
    WHERE (CAST(:customer_id AS TEXT) IS NULL OR customer_id = :customer_id)
      AND (CAST(:status AS TEXT) IS NULL OR status = :status)
      AND (CAST(:cursor_id AS TEXT) IS NULL OR CAST(id AS BIGINT) < CAST(:cursor_id AS BIGINT))
    ORDER BY CAST(id AS BIGINT) DESC
    LIMIT :limit
""")

_GET_LINES_SQL = text("""
    SELECT id, order_id, product_id, product_name, unit_price, quantity
    FROM order_lines
    WHERE order_id = ANY(CAST(:order_ids AS TEXT[]))
    ORDER BY order_id, id
""")


# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_line(row: Any) -> OrderLine:
    return OrderLine(
        id=row.id,
        order_id=row.order_id,
        product_id=row.product_id,
        product_name=row.product_name,
        unit_price=row.unit_price,
        quantity=row.quantity,
    )


def _row_to_order(row: Any, lines: list[OrderLine]) -> Order:
    """Convert a DB result row to an Order domain object."""
    return Order(
        id=row.id,
        order_number=row.order_number,
        customer_id=row.customer_id,
        payment_method=row.payment_method,
        subtotal_amount=row.subtotal_amount,
        shipping_fee=row.shipping_fee,
        surcharge_amount=row.surcharge_amount,
        total_amount=row.total_amount,
        shipping_address=row.shipping_address,
        recipient_name=row.recipient_name,
        contact_phone=row.contact_phone,
        notes=row.notes,
        status=row.status,
        lines=lines,
        created_at=row.created_at,
        updated_at=row.updated_at,
        paid_at=row.paid_at,
        cancelled_at=row.cancelled_at,
        cancelled_by=row.cancelled_by,
        cancel_reason=row.cancel_reason,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class OrderRepository:
    """Concrete implementation of OrderRepositoryProtocol using raw SQL."""

    async def create_order(self, db: AsyncSession, order: Order) -> None:
        result = await db.execute(
            _INSERT_ORDER_SQL,
            {
                "id": order.id,
                "order_number": order.order_number,
                "customer_id": order.customer_id,
                "payment_method": order.payment_method,
                "subtotal_amount": order.subtotal_amount,
                "shipping_fee": order.shipping_fee,
                "surcharge_amount": order.surcharge_amount,
                "total_amount": order.total_amount,
                "shipping_address": order.shipping_address,
                "recipient_name": order.recipient_name,
                "contact_phone": order.contact_phone,
                "notes": order.notes,
                "status": order.status,
            },
        )
        row = result.fetchone()
        if row is not None:
            order.created_at = row.created_at
            order.updated_at = row.updated_at
        for line in order.lines:
            await db.execute(
                _INSERT_LINE_SQL,
                {
                    "id": line.id,
                    "order_id": order.id,
                    "product_id": line.product_id,
                    "product_name": line.product_name,
                    "unit_price": line.unit_price,
                    "quantity": line.quantity,
                    "line_subtotal": line.line_subtotal,
                },
            )

    async def find_order_by_id(
        self, db: AsyncSession, order_id: str, for_update: bool = False
    ) -> Order | None:
        sql = _GET_ORDER_BY_ID_FOR_UPDATE_SQL if for_update else _GET_ORDER_BY_ID_SQL
        result = await db.execute(sql, {"id": order_id})
        row = result.fetchone()
        if row is None:
            return None
        lines = await self._load_lines(db, [row.id])
        return _row_to_order(row, lines.get(row.id, []))

    async def update_order_status(self, db: AsyncSession, order: Order) -> bool:
        result = await db.execute(
            _UPDATE_STATUS_SQL,
            {
                "id": order.id,
                "status": order.status,
                "cancelled_at": order.cancelled_at,
                "cancelled_by": order.cancelled_by,
                "cancel_reason": order.cancel_reason,
            },
        )
        row = result.fetchone()
        if row is None:
            return False
        order.updated_at = row.updated_at
        return True

    async def update_payment(self, db: AsyncSession, order: Order) -> None:
        await db.execute(
            _UPDATE_PAYMENT_SQL,
            {
                "id": order.id,
                "payment_method": order.payment_method,
                "surcharge_amount": order.surcharge_amount,
                "total_amount": order.total_amount,
                "paid_at": order.paid_at,
            },
        )

    async def list_orders(
        self,
        db: AsyncSession,
        customer_id: str | None,
        status: str | None,
        limit: int,
        cursor_id: str | None,
    ) -> list[Order]:
        result = await db.execute(
            _LIST_ORDERS_SQL,
            {
                "customer_id": customer_id,
                "status": status,
                "cursor_id": cursor_id,
                "limit": limit,
            },
        )
        rows = result.fetchall()
        if not rows:
            return []
        lines = await self._load_lines(db, [row.id for row in rows])
        return [_row_to_order(row, lines.get(row.id, [])) for row in rows]

    async def _load_lines(
        self, db: AsyncSession, order_ids: list[str]
    ) -> dict[str, list[OrderLine]]:
        result = await db.execute(_GET_LINES_SQL, {"order_ids": order_ids})
        grouped: dict[str, list[OrderLine]] = defaultdict(list)
        for row in result.fetchall():
            grouped[row.order_id].append(_row_to_line(row))
        return grouped
