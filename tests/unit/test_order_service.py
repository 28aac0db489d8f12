"""Unit tests for OrderApplicationService, AdminOrderService and order paging."""

from unittest.mock import AsyncMock

import pytest
from storefront_fakes import (
    FakeCartRepo,
    FakeCatalogRepo,
    FakeOrderRepo,
    FakeProductRepo,
    FakeSession,
    FakeStore,
)

from src.sf_admin.application.service import AdminOrderService
from src.sf_cart.domain.models import CartItem
from src.sf_catalog.application.service import CatalogService
from src.sf_catalog.domain.models import DEFAULT_SURCHARGE_RULES, CategoryRate
from src.sf_common.errors import (
    EmptyCartError,
    InvalidOrderStatusError,
    OrderForbiddenError,
    OrderNotFoundError,
)
from src.sf_order.application.assembler import OrderAssembler
from src.sf_order.application.lifecycle import OrderLifecycleManager
from src.sf_order.application.schemas import PlaceOrderRequest
from src.sf_order.application.service import OrderApplicationService, load_order_page
from src.sf_order.domain.models import Order


def _order(order_id: str, customer_id: str = "cust-1", status: str = "PENDING") -> Order:
    return Order(
        id=order_id,
        order_number=f"ORDER-{order_id}",
        customer_id=customer_id,
        payment_method="card",
        subtotal_amount=1000,
        shipping_fee=300,
        surcharge_amount=0,
        total_amount=1300,
        shipping_address="Tokyo",
        recipient_name="Sato",
        status=status,
    )


def _store() -> FakeStore:
    store = FakeStore()
    store.add_product("p1", price=1000, stock=5, category_id="cat-a")
    store.rates = {
        "cat-a": CategoryRate("cat-a", fee_per_order=300, free_shipping_threshold=5000),
    }
    store.surcharge_rules = dict(DEFAULT_SURCHARGE_RULES)
    return store


def _services(store: FakeStore) -> tuple[OrderApplicationService, AdminOrderService]:
    orders = FakeOrderRepo(store)
    products = FakeProductRepo(store)
    carts = FakeCartRepo(store)
    catalog = CatalogService(repo=FakeCatalogRepo(store), fallback_fee=500)
    lifecycle = OrderLifecycleManager(order_repo=orders, product_repo=products, catalog=catalog)
    customer = OrderApplicationService(
        repo=orders,
        cart_repo=carts,
        assembler=OrderAssembler(
            order_repo=orders, product_repo=products, cart_repo=carts, catalog=catalog
        ),
        lifecycle=lifecycle,
    )
    return customer, AdminOrderService(repo=orders, lifecycle=lifecycle)


def _request(payment_method: str = "cod") -> PlaceOrderRequest:
    return PlaceOrderRequest(
        shipping_address="1-2-3 Shibuya, Tokyo",
        recipient_name="Sato Hanako",
        payment_method=payment_method,
    )


class TestLoadOrderPage:
    async def test_newest_first_with_cursor(self) -> None:
        store = FakeStore()
        for i in range(1, 6):
            store.orders[str(i)] = _order(str(i))
        repo = FakeOrderRepo(store)

        first = await load_order_page(repo, FakeSession(store), "cust-1", None, 2, None)
        assert [o.id for o in first.items] == ["5", "4"]
        assert first.has_more is True
        assert first.next_cursor == "4"

        second = await load_order_page(repo, FakeSession(store), "cust-1", None, 2, "4")
        assert [o.id for o in second.items] == ["3", "2"]

        last = await load_order_page(repo, FakeSession(store), "cust-1", None, 2, "2")
        assert [o.id for o in last.items] == ["1"]
        assert last.has_more is False
        assert last.next_cursor is None

    async def test_filters_by_customer_and_status(self) -> None:
        store = FakeStore()
        store.orders["1"] = _order("1", status="SHIPPED")
        store.orders["2"] = _order("2")
        store.orders["3"] = _order("3", customer_id="cust-2")
        repo = FakeOrderRepo(store)

        page = await load_order_page(repo, FakeSession(store), "cust-1", "PENDING", 20, None)
        assert [o.id for o in page.items] == ["2"]

        everyone = await load_order_page(repo, FakeSession(store), None, None, 20, None)
        assert len(everyone.items) == 3

    async def test_unknown_status_filter(self) -> None:
        store = FakeStore()
        with pytest.raises(InvalidOrderStatusError):
            await load_order_page(FakeOrderRepo(store), FakeSession(store), None, "LOST", 20, None)

    async def test_garbage_cursor_starts_from_top(self) -> None:
        store = FakeStore()
        store.orders["1"] = _order("1")
        page = await load_order_page(
            FakeOrderRepo(store), FakeSession(store), "cust-1", None, 20, "abc"
        )
        assert [o.id for o in page.items] == ["1"]

    @pytest.mark.parametrize(
        "cursor", ["²", "١٢", "9223372036854775808", "99999999999999999999"]
    )
    async def test_cursor_outside_bigint_digits_ignored(self, cursor: str) -> None:
        store = FakeStore()
        store.orders["1"] = _order("1")
        repo = FakeOrderRepo(store)
        repo.list_orders = AsyncMock(wraps=repo.list_orders)

        page = await load_order_page(repo, FakeSession(store), "cust-1", None, 20, cursor)

        assert [o.id for o in page.items] == ["1"]
        assert repo.list_orders.await_args.args[-1] is None

    async def test_largest_bigint_cursor_passed_through(self) -> None:
        store = FakeStore()
        store.orders["1"] = _order("1")
        repo = FakeOrderRepo(store)
        repo.list_orders = AsyncMock(wraps=repo.list_orders)

        page = await load_order_page(
            repo, FakeSession(store), "cust-1", None, 20, "9223372036854775807"
        )

        assert [o.id for o in page.items] == ["1"]
        assert repo.list_orders.await_args.args[-1] == "9223372036854775807"


class TestCustomerOrders:
    async def test_place_order_from_cart(self) -> None:
        store = _store()
        store.carts["cust-1"] = [CartItem("p1", 2)]
        customer, _ = _services(store)

        resp = await customer.place_order_from_cart(FakeSession(store), "cust-1", _request())

        assert resp.order.payment_method == "cash_on_delivery"
        assert resp.order.total_amount == 2000 + 300 + 330
        assert resp.order.total_display == "¥2,630"
        assert resp.shipping_breakdown[0].category == "cat-a"
        assert resp.fallback_shipping_applied is False
        assert "cust-1" not in store.carts

    async def test_place_order_with_empty_cart(self) -> None:
        store = _store()
        customer, _ = _services(store)
        with pytest.raises(EmptyCartError):
            await customer.place_order_from_cart(FakeSession(store), "cust-1", _request())

    async def test_get_own_order(self) -> None:
        store = _store()
        store.orders["7"] = _order("7")
        customer, _ = _services(store)
        resp = await customer.get_order(FakeSession(store), "7", "cust-1")
        assert resp.order_number == "ORDER-7"

    async def test_get_other_customers_order(self) -> None:
        store = _store()
        store.orders["7"] = _order("7", customer_id="cust-2")
        customer, _ = _services(store)
        with pytest.raises(OrderForbiddenError):
            await customer.get_order(FakeSession(store), "7", "cust-1")

    async def test_get_missing_order(self) -> None:
        store = _store()
        customer, _ = _services(store)
        with pytest.raises(OrderNotFoundError):
            await customer.get_order(FakeSession(store), "7", "cust-1")

    async def test_list_only_own_orders(self) -> None:
        store = _store()
        store.orders["1"] = _order("1")
        store.orders["2"] = _order("2", customer_id="cust-2")
        customer, _ = _services(store)
        page = await customer.list_orders(FakeSession(store), "cust-1", None, 20, None)
        assert [o.id for o in page.items] == ["1"]

    async def test_cancel_and_change_payment(self) -> None:
        store = _store()
        store.carts["cust-1"] = [CartItem("p1", 1)]
        customer, _ = _services(store)
        placed = await customer.place_order_from_cart(
            FakeSession(store), "cust-1", _request("card")
        )

        changed = await customer.change_payment_method(
            FakeSession(store), placed.order.id, "cust-1", "cash_on_delivery"
        )
        assert changed.surcharge_amount == 330

        cancelled = await customer.cancel_order(
            FakeSession(store), placed.order.id, "cust-1", None
        )
        assert cancelled.status == "CANCELLED"
        assert store.products["p1"].stock == 5


class TestAdminOrders:
    async def test_lists_every_customer(self) -> None:
        store = _store()
        store.orders["1"] = _order("1")
        store.orders["2"] = _order("2", customer_id="cust-2")
        _, admin = _services(store)
        page = await admin.list_orders(FakeSession(store), None, None, 20, None)
        assert [o.id for o in page.items] == ["2", "1"]

    async def test_get_missing_order(self) -> None:
        store = _store()
        _, admin = _services(store)
        with pytest.raises(OrderNotFoundError):
            await admin.get_order(FakeSession(store), "9")

    async def test_status_and_paid_stamp(self) -> None:
        store = _store()
        store.orders["1"] = _order("1")
        _, admin = _services(store)

        paid = await admin.mark_paid(FakeSession(store), "1")
        assert paid.paid_at is not None

        shipped = await admin.set_status(FakeSession(store), "1", "SHIPPED")
        assert shipped.status == "SHIPPED"
        assert store.orders["1"].status == "SHIPPED"
