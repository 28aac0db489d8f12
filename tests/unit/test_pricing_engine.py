"""Tests for the pricing engine: subtotal, per-category shipping, surcharge, total."""

import pytest

from src.sf_catalog.domain.models import (
    DEFAULT_SURCHARGE_RULES,
    CategoryRate,
    PaymentSurchargeRule,
)
from src.sf_catalog.domain.rate_catalog import RateCatalog
from src.sf_common.enums import RateSource
from src.sf_pricing.domain.engine import (
    calc_surcharge,
    group_by_category,
    price,
    split_surcharge,
    validate_lines,
)
from src.sf_pricing.domain.models import DEFAULT_GROUP_KEY, CartLine

_CARD = DEFAULT_SURCHARGE_RULES["card"]
_COD = DEFAULT_SURCHARGE_RULES["cash_on_delivery"]
_BANK = DEFAULT_SURCHARGE_RULES["bank_transfer"]


def _two_category_catalog() -> RateCatalog:
    return RateCatalog(
        rates_by_category={
            "cat-a": CategoryRate("cat-a", fee_per_order=300, free_shipping_threshold=5000),
            "cat-b": CategoryRate("cat-b", fee_per_order=500, free_shipping_threshold=10000),
        },
    )


def _line(
    pid: str, price_: int, qty: int = 1, cat: str | None = "cat-a", digital: bool = False
) -> CartLine:
    return CartLine(
        product_id=pid, quantity=qty, unit_price=price_, category_id=cat, is_digital=digital
    )


class TestPerCategoryFreeShipping:
    def test_each_group_judged_against_its_own_threshold(self) -> None:
        """A (6000 >= 5000) ships free, B (4000 < 10000) pays 500, cart total is irrelevant."""
        lines = [_line("a1", 6000, cat="cat-a"), _line("b1", 4000, cat="cat-b")]
        result = price(lines, _two_category_catalog(), _BANK)

        assert result.subtotal_amount == 10000
        assert result.shipping_fee == 500
        assert result.total_amount == 10500
        by_key = {s.category_key: s for s in result.shipping_breakdown}
        assert by_key["cat-a"].is_free and by_key["cat-a"].fee == 0
        assert not by_key["cat-b"].is_free and by_key["cat-b"].fee == 500

    def test_fee_charged_once_per_group_not_per_line(self) -> None:
        lines = [_line("a1", 1000), _line("a2", 1000, qty=2)]
        result = price(lines, _two_category_catalog(), _BANK)
        assert result.shipping_fee == 300

    def test_exactly_at_threshold_is_free(self) -> None:
        result = price([_line("a1", 5000)], _two_category_catalog(), _BANK)
        assert result.shipping_fee == 0

    def test_no_threshold_never_free(self) -> None:
        catalog = RateCatalog(default_rate=CategoryRate(None, 700, None))
        result = price([_line("x", 1_000_000, cat=None)], catalog, _BANK)
        assert result.shipping_fee == 700


class TestRateFallback:
    def test_missing_category_rate_uses_default(self) -> None:
        catalog = RateCatalog(default_rate=CategoryRate(None, 800, 8000))
        result = price([_line("c1", 1000, cat="cat-c")], catalog, _BANK)
        assert result.shipping_fee == 800
        assert result.shipping_breakdown[0].source == RateSource.DEFAULT
        assert not result.fallback_applied

    def test_no_rate_at_all_uses_500_and_is_flagged(self) -> None:
        result = price([_line("c1", 1000, cat="cat-c")], RateCatalog(), _BANK)
        assert result.shipping_fee == 500
        assert result.fallback_applied
        assert result.fallback_categories == ["cat-c"]

    def test_uncategorised_lines_form_default_group(self) -> None:
        groups = group_by_category([_line("x", 100, cat=None), _line("y", 200, cat=None)])
        assert groups == {None: 300}

    def test_category_named_default_keeps_its_own_rate(self) -> None:
        catalog = RateCatalog(
            rates_by_category={"default": CategoryRate("default", 300, 5000)},
            default_rate=CategoryRate(None, 700, None),
        )
        lines = [_line("d1", 6000, cat="default"), _line("u1", 1000, cat=None)]

        result = price(lines, catalog, _BANK)

        assert group_by_category(lines) == {"default": 6000, None: 1000}
        assert [(s.category_key, s.fee, s.source) for s in result.shipping_breakdown] == [
            ("default", 0, RateSource.CATEGORY),
            (DEFAULT_GROUP_KEY, 700, RateSource.DEFAULT),
        ]
        assert result.shipping_fee == 700


class TestDigitalLines:
    def test_digital_only_cart_has_no_shipping(self) -> None:
        result = price([_line("e1", 1200, digital=True)], RateCatalog(), _BANK)
        assert result.shipping_fee == 0
        assert result.shipping_breakdown == ()
        assert result.subtotal_amount == 1200

    def test_digital_lines_do_not_count_toward_threshold(self) -> None:
        lines = [_line("a1", 3000), _line("e1", 3000, cat="cat-a", digital=True)]
        result = price(lines, _two_category_catalog(), _BANK)
        assert result.subtotal_amount == 6000
        assert result.shipping_fee == 300


class TestSurcharge:
    def test_cod_customer_bearer_adds_to_total(self) -> None:
        catalog = RateCatalog(default_rate=CategoryRate(None, 0, None))
        cod = price([_line("a1", 2000, cat=None)], catalog, _COD)
        bank = price([_line("a1", 2000, cat=None)], catalog, _BANK)
        assert cod.surcharge_amount == 330
        assert cod.total_amount == 2330
        assert bank.total_amount == 2000

    def test_card_percentage_merchant_bearer_excluded_from_total(self) -> None:
        catalog = RateCatalog(default_rate=CategoryRate(None, 0, None))
        result = price([_line("a1", 10000, cat=None)], catalog, _CARD)
        assert result.surcharge_amount == 0
        assert result.merchant_surcharge_amount == 360
        assert result.total_amount == 10000

    def test_card_percentage_customer_bearer(self) -> None:
        rule = PaymentSurchargeRule(
            method="card", fee_model="percentage", rate_bps=360, bearer="customer"
        )
        assert split_surcharge(10000, rule) == (360, 0)

    def test_percentage_is_of_subtotal_only(self) -> None:
        rule = PaymentSurchargeRule(
            method="card", fee_model="percentage", rate_bps=1000, bearer="customer"
        )
        catalog = RateCatalog(default_rate=CategoryRate(None, 500, None))
        result = price([_line("a1", 1000, cat=None)], catalog, rule)
        assert result.surcharge_amount == 100
        assert result.total_amount == 1000 + 500 + 100

    def test_unknown_fee_model_raises(self) -> None:
        rule = PaymentSurchargeRule(method="card", fee_model="tiered")
        with pytest.raises(ValueError, match="fee model"):
            calc_surcharge(1000, rule)

    def test_unknown_bearer_raises(self) -> None:
        rule = PaymentSurchargeRule(method="card", fee_model="fixed", bearer="bank")
        with pytest.raises(ValueError, match="bearer"):
            split_surcharge(1000, rule)


class TestInvariants:
    def test_total_is_sum_of_parts(self) -> None:
        lines = [_line("a1", 1234, qty=3), _line("b1", 999, cat="cat-b")]
        result = price(lines, _two_category_catalog(), _COD)
        assert result.total_amount == (
            result.subtotal_amount + result.shipping_fee + result.surcharge_amount
        )

    def test_deterministic(self) -> None:
        lines = [_line("a1", 1234, qty=3), _line("b1", 999, cat="cat-b")]
        assert price(lines, _two_category_catalog(), _COD) == price(
            lines, _two_category_catalog(), _COD
        )


class TestValidation:
    def test_empty_cart_raises(self) -> None:
        with pytest.raises(ValueError, match="empty"):
            validate_lines([])

    def test_zero_quantity_raises(self) -> None:
        with pytest.raises(ValueError, match="Quantity"):
            price([_line("a1", 100, qty=0)], RateCatalog(), _BANK)

    def test_negative_price_raises(self) -> None:
        with pytest.raises(ValueError, match="price"):
            price([_line("a1", -1)], RateCatalog(), _BANK)
