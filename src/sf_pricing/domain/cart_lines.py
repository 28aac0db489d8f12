"""Resolve requested cart items against current product records."""
from src.sf_cart.domain.models import CartItem
from src.sf_catalog.domain.models import Product
from src.sf_common.errors import ProductUnavailableError
from src.sf_pricing.domain.models import CartLine


def to_cart_lines(items: list[CartItem], products: list[Product]) -> list[CartLine]:
    """Price each item at the product's current price and category.

    Raises ProductUnavailableError for a missing or inactive product.
    """
    by_id = {p.id: p for p in products}
    lines: list[CartLine] = []
    for item in items:
        product = by_id.get(item.product_id)
        if product is None:
            raise ProductUnavailableError(item.product_id)
        if not product.is_active:
            raise ProductUnavailableError(product.id, product.name)
        lines.append(
            CartLine(
                product_id=product.id,
                quantity=item.quantity,
                unit_price=product.price,
                category_id=product.category_id,
                is_digital=product.is_digital,
            )
        )
    return lines
