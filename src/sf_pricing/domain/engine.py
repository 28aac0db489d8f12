"""Pricing engine: cart lines -> subtotal, shipping, payment surcharge, total.

Pure and synchronous. Malformed input raises ValueError; nothing is caught here.

Shipping is charged once per category group and each group is judged against
its OWN free-shipping threshold. There is deliberately no whole-cart rule:
A (threshold 5000, fee 300) with 6000 of goods and B (threshold 10000, fee 500)
with 4000 of goods ship for 0 + 500 = 500 even though the cart totals 10000.
"""
from src.sf_catalog.domain.models import PaymentSurchargeRule
from src.sf_catalog.domain.rate_catalog import RateCatalog
from src.sf_common.enums import FeeBearer, FeeModel
from src.sf_common.yen import percentage_of
from src.sf_pricing.domain.models import (
    DEFAULT_GROUP_KEY,
    CartLine,
    CategoryShipping,
    PricingResult,
)


def validate_lines(lines: list[CartLine]) -> None:
    if not lines:
        raise ValueError("Cannot price an empty cart")
    for line in lines:
        if line.quantity <= 0:
            raise ValueError(f"Quantity must be positive: {line.product_id} x {line.quantity}")
        if line.unit_price < 0:
            raise ValueError(f"Unit price must be non-negative: {line.product_id}")


def group_by_category(lines: list[CartLine]) -> dict[str | None, int]:
    """Physical lines only: {category_id: group subtotal}, in first-seen order.

    Uncategorised lines group under None, apart from any real category.
    """
    groups: dict[str | None, int] = {}
    for line in lines:
        if line.is_digital:
            continue
        key = line.category_id or None
        groups[key] = groups.get(key, 0) + line.line_subtotal
    return groups


def calc_shipping(
    groups: dict[str | None, int], catalog: RateCatalog
) -> tuple[CategoryShipping, ...]:
    breakdown: list[CategoryShipping] = []
    for category_id, group_subtotal in groups.items():
        rate = catalog.resolve(category_id)
        threshold = rate.free_shipping_threshold
        is_free = threshold is not None and group_subtotal >= threshold
        breakdown.append(
            CategoryShipping(
                category_key=DEFAULT_GROUP_KEY if category_id is None else category_id,
                subtotal=group_subtotal,
                fee=0 if is_free else rate.fee_per_order,
                free_shipping_threshold=threshold,
                is_free=is_free,
                source=rate.source,
            )
        )
    return tuple(breakdown)


def calc_surcharge(subtotal_amount: int, rule: PaymentSurchargeRule) -> int:
    """Surcharge as computed by the rule, before deciding who bears it."""
    if rule.fee_model == FeeModel.PERCENTAGE:
        return percentage_of(subtotal_amount, rule.rate_bps)
    if rule.fee_model == FeeModel.FIXED:
        if rule.fixed_amount < 0:
            raise ValueError(f"Fixed surcharge must be non-negative: {rule.fixed_amount}")
        return rule.fixed_amount
    raise ValueError(f"Unknown fee model: {rule.fee_model}")


def split_surcharge(subtotal_amount: int, rule: PaymentSurchargeRule) -> tuple[int, int]:
    """Return (customer_surcharge, merchant_surcharge); at most one is non-zero."""
    amount = calc_surcharge(subtotal_amount, rule)
    if rule.bearer == FeeBearer.CUSTOMER:
        return amount, 0
    if rule.bearer == FeeBearer.MERCHANT:
        return 0, amount
    raise ValueError(f"Unknown fee bearer: {rule.bearer}")


def price(
    lines: list[CartLine],
    catalog: RateCatalog,
    surcharge_rule: PaymentSurchargeRule,
) -> PricingResult:
    validate_lines(lines)

    subtotal_amount = sum(line.line_subtotal for line in lines)
    breakdown = calc_shipping(group_by_category(lines), catalog)
    shipping_fee = sum(s.fee for s in breakdown)
    surcharge_amount, merchant_surcharge = split_surcharge(subtotal_amount, surcharge_rule)

    return PricingResult(
        subtotal_amount=subtotal_amount,
        shipping_fee=shipping_fee,
        surcharge_amount=surcharge_amount,
        total_amount=subtotal_amount + shipping_fee + surcharge_amount,
        merchant_surcharge_amount=merchant_surcharge,
        shipping_breakdown=breakdown,
    )
