"""Cart domain model — what the customer asked for, before prices are resolved."""
from dataclasses import dataclass


@dataclass(frozen=True)
class CartItem:
    product_id: str
    quantity: int


def merge_items(items: list[CartItem]) -> list[CartItem]:
    """Collapse repeated products into one item, keeping first-seen order."""
    merged: dict[str, int] = {}
    for item in items:
        merged[item.product_id] = merged.get(item.product_id, 0) + item.quantity
    return [CartItem(product_id=pid, quantity=qty) for pid, qty in merged.items()]
