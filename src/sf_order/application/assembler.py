# src/sf_order/application/assembler.py
"""OrderAssembler — converts a cart into a PENDING order in one transaction.

Steps (all inside a single DB transaction, rolled back as a whole on failure):
  1. validate input (non-empty, positive quantities); a cart order reads and
     locks the customer's cart rows first
  2. resolve the payment surcharge rule (disabled methods rejected)
  3. lock product rows FOR UPDATE (id order), reject missing/inactive products
  4. check stock for every line
  5. load the rate catalog and price the cart
  6. insert order + lines under a fresh order number (retry once on collision)
  7. conditionally decrement stock; remove the ordered rows from the cart

Concurrent placements against the same product serialise on the row lock,
so the second one re-reads the decremented stock and fails cleanly. A double
submit of the same cart waits on the cart row locks and then finds it empty.
"""
import logging
from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.sf_cart.domain.models import CartItem, merge_items
from src.sf_cart.domain.repository import CartRepositoryProtocol
from src.sf_cart.infrastructure.persistence import CartRepository
from src.sf_catalog.application.service import CatalogService
from src.sf_catalog.domain.models import Product
from src.sf_catalog.domain.repository import ProductRepositoryProtocol
from src.sf_catalog.infrastructure.persistence import ProductRepository
from src.sf_common.enums import OrderStatus
from src.sf_common.errors import (
    EmptyCartError,
    InsufficientStockError,
    InvalidQuantityError,
    TransactionFailedError,
)
from src.sf_common.id_generator import generate_id, generate_order_number
from src.sf_common.transaction import run_in_transaction
from src.sf_order.domain.models import Order, OrderLine
from src.sf_order.domain.repository import OrderRepositoryProtocol
from src.sf_order.infrastructure.persistence import ORDER_NUMBER_CONSTRAINT, OrderRepository
from src.sf_pricing.domain.cart_lines import to_cart_lines
from src.sf_pricing.domain.engine import price
from src.sf_pricing.domain.models import PricingResult

logger = logging.getLogger(__name__)

_ORDER_NUMBER_ATTEMPTS = 2


@dataclass(frozen=True)
class PlaceOrderCommand:
    customer_id: str
    items: list[CartItem] | None  # None: order the customer's cart
    shipping_address: str
    recipient_name: str
    payment_method: str
    contact_phone: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class PlacedOrder:
    order: Order
    pricing: PricingResult


class OrderAssembler:
    def __init__(
        self,
        order_repo: OrderRepositoryProtocol | None = None,
        product_repo: ProductRepositoryProtocol | None = None,
        cart_repo: CartRepositoryProtocol | None = None,
        catalog: CatalogService | None = None,
        order_number_factory: Callable[[], str] = generate_order_number,
    ) -> None:
        self._orders: OrderRepositoryProtocol = order_repo or OrderRepository()
        self._products: ProductRepositoryProtocol = product_repo or ProductRepository()
        self._cart: CartRepositoryProtocol = cart_repo or CartRepository()
        self._catalog = catalog or CatalogService()
        self._next_order_number = order_number_factory

    async def place_order(self, db: AsyncSession, cmd: PlaceOrderCommand) -> PlacedOrder:
        items = None if cmd.items is None else _validate_items(cmd.items)
        placed = await run_in_transaction(
            db, lambda: self._place_order_inner(db, cmd, items), action="Order placement"
        )
        logger.info(
            "Order %s placed by %s: subtotal=%d shipping=%d surcharge=%d total=%d",
            placed.order.order_number,
            cmd.customer_id,
            placed.order.subtotal_amount,
            placed.order.shipping_fee,
            placed.order.surcharge_amount,
            placed.order.total_amount,
        )
        return placed

    async def _place_order_inner(
        self, db: AsyncSession, cmd: PlaceOrderCommand, items: list[CartItem] | None
    ) -> PlacedOrder:
        from_cart = items is None
        if items is None:
            items = _validate_items(
                await self._cart.list_items(db, cmd.customer_id, for_update=True)
            )
        rule = await self._catalog.get_surcharge_rule(db, cmd.payment_method)

        products = await self._products.find_products_by_ids(
            db, [i.product_id for i in items], for_update=True
        )
        lines = to_cart_lines(items, products)
        by_id = {p.id: p for p in products}
        _check_stock(items, by_id)

        catalog = await self._catalog.load_rate_catalog(
            db, {line.category_id for line in lines if not line.is_digital}
        )
        pricing = price(lines, catalog, rule)
        if pricing.fallback_applied:
            logger.warning(
                "Fallback shipping fee applied for categories %s (customer %s)",
                pricing.fallback_categories,
                cmd.customer_id,
            )

        order = _build_order(cmd, items, by_id, pricing)
        await self._insert_with_unique_number(db, order)

        for line in order.lines:
            remaining = await self._products.decrement_stock(db, line.product_id, line.quantity)
            if remaining is None:
                raise InsufficientStockError(
                    line.product_id, line.quantity, by_id[line.product_id].stock
                )

        if from_cart:
            await self._cart.remove_items(db, cmd.customer_id, [i.product_id for i in items])
        return PlacedOrder(order=order, pricing=pricing)

    async def _insert_with_unique_number(self, db: AsyncSession, order: Order) -> None:
        for _ in range(_ORDER_NUMBER_ATTEMPTS):
            order.order_number = self._next_order_number()
            try:
                async with db.begin_nested():
                    await self._orders.create_order(db, order)
                return
            except IntegrityError as exc:
                if ORDER_NUMBER_CONSTRAINT not in str(exc.orig):
                    raise
                logger.warning("Order number collision on %s, regenerating", order.order_number)
        raise TransactionFailedError("Could not allocate a unique order number, please retry")


def _validate_items(items: list[CartItem]) -> list[CartItem]:
    if not items:
        raise EmptyCartError()
    for item in items:
        if item.quantity <= 0:
            raise InvalidQuantityError(item.product_id, item.quantity)
    return merge_items(items)


def _check_stock(items: list[CartItem], products: dict[str, Product]) -> None:
    for item in items:
        product = products[item.product_id]
        if product.stock < item.quantity:
            raise InsufficientStockError(product.id, item.quantity, product.stock)


def _build_order(
    cmd: PlaceOrderCommand,
    items: list[CartItem],
    products: dict[str, Product],
    pricing: PricingResult,
) -> Order:
    order_id = generate_id()
    lines = [
        OrderLine(
            id=generate_id(),
            order_id=order_id,
            product_id=item.product_id,
            product_name=products[item.product_id].name,
            unit_price=products[item.product_id].price,
            quantity=item.quantity,
        )
        for item in items
    ]
    return Order(
        id=order_id,
        order_number="",
        customer_id=cmd.customer_id,
        payment_method=cmd.payment_method,
        subtotal_amount=pricing.subtotal_amount,
        shipping_fee=pricing.shipping_fee,
        surcharge_amount=pricing.surcharge_amount,
        total_amount=pricing.total_amount,
        shipping_address=cmd.shipping_address,
        recipient_name=cmd.recipient_name,
        contact_phone=cmd.contact_phone,
        notes=cmd.notes,
        status=OrderStatus.PENDING.value,
        lines=lines,
    )
