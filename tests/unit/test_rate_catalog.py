"""Tests for RateCatalog resolution: category -> default -> fallback."""

from src.sf_catalog.domain.models import CategoryRate
from src.sf_catalog.domain.rate_catalog import FALLBACK_SHIPPING_FEE, RateCatalog
from src.sf_common.enums import RateSource


def _rate(
    category_id: str | None, fee: int, threshold: int | None, active: bool = True
) -> CategoryRate:
    return CategoryRate(
        category_id=category_id,
        fee_per_order=fee,
        free_shipping_threshold=threshold,
        is_active=active,
    )


class TestResolve:
    def test_category_rate_wins(self) -> None:
        catalog = RateCatalog(
            rates_by_category={"cat-a": _rate("cat-a", 300, 5000)},
            default_rate=_rate(None, 800, 8000),
        )
        resolved = catalog.resolve("cat-a")
        assert resolved.fee_per_order == 300
        assert resolved.free_shipping_threshold == 5000
        assert resolved.source == RateSource.CATEGORY

    def test_unknown_category_uses_default(self) -> None:
        catalog = RateCatalog(default_rate=_rate(None, 800, 8000))
        resolved = catalog.resolve("cat-z")
        assert resolved.fee_per_order == 800
        assert resolved.source == RateSource.DEFAULT

    def test_uncategorised_uses_default(self) -> None:
        catalog = RateCatalog(default_rate=_rate(None, 800, None))
        assert catalog.resolve(None).source == RateSource.DEFAULT

    def test_inactive_category_rate_ignored(self) -> None:
        catalog = RateCatalog(
            rates_by_category={"cat-a": _rate("cat-a", 300, 5000, active=False)},
            default_rate=_rate(None, 800, 8000),
        )
        assert catalog.resolve("cat-a").source == RateSource.DEFAULT

    def test_fallback_when_nothing_configured(self) -> None:
        resolved = RateCatalog().resolve("cat-a")
        assert resolved.fee_per_order == FALLBACK_SHIPPING_FEE == 500
        assert resolved.free_shipping_threshold is None
        assert resolved.source == RateSource.FALLBACK

    def test_fallback_when_default_inactive(self) -> None:
        catalog = RateCatalog(default_rate=_rate(None, 800, 8000, active=False))
        assert catalog.resolve(None).source == RateSource.FALLBACK

    def test_custom_fallback_fee(self) -> None:
        assert RateCatalog(fallback_fee=700).resolve(None).fee_per_order == 700

    def test_default_rate_flag(self) -> None:
        assert _rate(None, 1, None).is_default
        assert not _rate("cat-a", 1, None).is_default
