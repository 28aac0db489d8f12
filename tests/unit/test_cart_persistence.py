"""Unit tests for CartRepository and cart item merging."""
from unittest.mock import AsyncMock, MagicMock

from src.sf_cart.domain.models import CartItem, merge_items
from src.sf_cart.infrastructure.persistence import CartRepository


class TestMergeItems:
    def test_duplicates_are_summed_in_first_seen_order(self) -> None:
        items = [CartItem("b", 1), CartItem("a", 2), CartItem("b", 3)]
        assert merge_items(items) == [CartItem("b", 4), CartItem("a", 2)]

    def test_empty(self) -> None:
        assert merge_items([]) == []


class TestCartRepository:
    async def test_list_items(self) -> None:
        result = MagicMock()
        result.fetchall.return_value = [MagicMock(product_id="p1", quantity=2)]
        db = MagicMock()
        db.execute = AsyncMock(return_value=result)

        items = await CartRepository().list_items(db, "cust-1")

        assert items == [CartItem("p1", 2)]
        assert db.execute.call_args.args[1] == {"customer_id": "cust-1"}

    async def test_list_items_for_update_locks_rows(self) -> None:
        result = MagicMock()
        result.fetchall.return_value = []
        db = MagicMock()
        db.execute = AsyncMock(return_value=result)

        await CartRepository().list_items(db, "cust-1", for_update=True)

        assert "FOR UPDATE" in str(db.execute.call_args.args[0])

    async def test_remove_items_deletes_only_given_products(self) -> None:
        db = MagicMock()
        db.execute = AsyncMock(return_value=MagicMock(rowcount=2))

        removed = await CartRepository().remove_items(db, "cust-1", ("p1", "p2"))

        assert removed == 2
        sql = str(db.execute.call_args.args[0])
        assert "product_id = ANY" in sql
        assert db.execute.call_args.args[1] == {
            "customer_id": "cust-1",
            "product_ids": ["p1", "p2"],
        }
