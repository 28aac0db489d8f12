# src/sf_order/application/lifecycle.py
"""OrderLifecycleManager — status changes, cancellation and payment updates.

Every operation locks the order row (SELECT ... FOR UPDATE) and runs in one
transaction. Cancellation restores stock in the same transaction as the
status change; the status UPDATE is conditional on the order not already
being CANCELLED, so stock is restored at most once however often it is called.
Product rows are locked in id order before their stock is touched, the same
order placement uses.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.sf_catalog.application.service import CatalogService
from src.sf_catalog.domain.repository import ProductRepositoryProtocol
from src.sf_catalog.infrastructure.persistence import ProductRepository
from src.sf_common.datetime_utils import utc_now
from src.sf_common.enums import CancelledBy, OrderStatus
from src.sf_common.errors import (
    AlreadyCancelledError,
    InvalidStatusTransitionError,
    OrderForbiddenError,
    OrderNotCancellableError,
    OrderNotFoundError,
    PaymentMethodLockedError,
)
from src.sf_common.transaction import run_in_transaction
from src.sf_order.domain.models import Order
from src.sf_order.domain.repository import OrderRepositoryProtocol
from src.sf_order.domain.status import can_transition, parse_status
from src.sf_order.infrastructure.persistence import OrderRepository
from src.sf_pricing.domain.engine import split_surcharge

logger = logging.getLogger(__name__)

CUSTOMER_CANCEL_REASON = "Cancelled by customer"
ADMIN_CANCEL_REASON = "Cancelled by administrator"


class OrderLifecycleManager:
    def __init__(
        self,
        order_repo: OrderRepositoryProtocol | None = None,
        product_repo: ProductRepositoryProtocol | None = None,
        catalog: CatalogService | None = None,
    ) -> None:
        self._orders: OrderRepositoryProtocol = order_repo or OrderRepository()
        self._products: ProductRepositoryProtocol = product_repo or ProductRepository()
        self._catalog = catalog or CatalogService()

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    async def set_status(
        self,
        db: AsyncSession,
        order_id: str,
        new_status: str,
        cancel_reason: str | None = None,
    ) -> Order:
        target = parse_status(new_status)

        async def work() -> Order:
            order = await self._load_locked(db, order_id)
            if target == OrderStatus.CANCELLED:
                await self._cancel_locked(
                    db, order, CancelledBy.ADMIN, cancel_reason or ADMIN_CANCEL_REASON
                )
                return order
            if order.is_cancelled:
                raise AlreadyCancelledError(order.id)
            if not can_transition(order.status, target):
                raise InvalidStatusTransitionError(order.id, order.status, target.value)
            previous = order.status
            order.status = target.value
            await self._orders.update_order_status(db, order)
            logger.info("Order %s status %s -> %s", order.order_number, previous, order.status)
            return order

        return await run_in_transaction(db, work, action="Order status update")

    async def mark_paid(self, db: AsyncSession, order_id: str) -> Order:
        """Stamp paid_at once; repeated calls keep the first timestamp."""

        async def work() -> Order:
            order = await self._load_locked(db, order_id)
            if order.is_cancelled:
                raise AlreadyCancelledError(order.id)
            if order.paid_at is None:
                order.paid_at = utc_now()
                await self._orders.update_payment(db, order)
            return order

        return await run_in_transaction(db, work, action="Order payment stamp")

    # ------------------------------------------------------------------
    # Customer
    # ------------------------------------------------------------------

    async def cancel(
        self,
        db: AsyncSession,
        order_id: str,
        requesting_customer_id: str,
        reason: str | None = None,
    ) -> Order:
        async def work() -> Order:
            order = await self._load_locked(db, order_id)
            if order.customer_id != requesting_customer_id:
                raise OrderForbiddenError(order.id)
            await self._cancel_locked(
                db, order, CancelledBy.CUSTOMER, reason or CUSTOMER_CANCEL_REASON
            )
            return order

        return await run_in_transaction(db, work, action="Order cancellation")

    async def change_payment_method(
        self,
        db: AsyncSession,
        order_id: str,
        requesting_customer_id: str,
        payment_method: str,
    ) -> Order:
        """Switch an unpaid PENDING order to another method and re-price its surcharge."""

        async def work() -> Order:
            order = await self._load_locked(db, order_id)
            if order.customer_id != requesting_customer_id:
                raise OrderForbiddenError(order.id)
            if order.status != OrderStatus.PENDING or order.paid_at is not None:
                raise PaymentMethodLockedError(order.id)
            rule = await self._catalog.get_surcharge_rule(db, payment_method)
            surcharge, _ = split_surcharge(order.subtotal_amount, rule)
            order.apply_surcharge(payment_method, surcharge)
            await self._orders.update_payment(db, order)
            return order

        return await run_in_transaction(db, work, action="Payment method change")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _load_locked(self, db: AsyncSession, order_id: str) -> Order:
        order = await self._orders.find_order_by_id(db, order_id, for_update=True)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    async def _cancel_locked(
        self, db: AsyncSession, order: Order, by: CancelledBy, reason: str
    ) -> None:
        if order.is_cancelled:
            raise AlreadyCancelledError(order.id)
        if order.is_terminal:
            raise OrderNotCancellableError(order.id, order.status)

        order.status = OrderStatus.CANCELLED.value
        order.cancelled_at = utc_now()
        order.cancelled_by = by.value
        order.cancel_reason = reason
        if not await self._orders.update_order_status(db, order):
            raise AlreadyCancelledError(order.id)

        quantities: dict[str, int] = {}
        for line in order.lines:
            quantities[line.product_id] = quantities.get(line.product_id, 0) + line.quantity
        # Lock product rows in id order, same as placement, before any UPDATE.
        locked = await self._products.find_products_by_ids(db, list(quantities), for_update=True)
        for product in locked:
            await self._products.increment_stock(db, product.id, quantities[product.id])
        logger.info(
            "Order %s cancelled by %s, restored %d item(s) to stock",
            order.order_number,
            by.value,
            order.item_count,
        )
