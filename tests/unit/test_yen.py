"""Tests for sf_common.yen — integer arithmetic utilities."""

import pytest

from src.sf_common.yen import percentage_of, yen_to_display


class TestYenToDisplay:
    def test_basic(self) -> None:
        assert yen_to_display(12800) == "¥12,800"

    def test_zero(self) -> None:
        assert yen_to_display(0) == "¥0"

    def test_small(self) -> None:
        assert yen_to_display(330) == "¥330"

    def test_negative(self) -> None:
        assert yen_to_display(-300) == "-¥300"

    def test_millions(self) -> None:
        assert yen_to_display(1_234_567) == "¥1,234,567"


class TestPercentageOf:
    def test_card_rate_on_ten_thousand(self) -> None:
        # 3.6% of ¥10,000
        assert percentage_of(10000, 360) == 360

    def test_rounds_half_up(self) -> None:
        # 3.6% of 125 = 4.5 -> 5
        assert percentage_of(125, 360) == 5

    def test_rounds_to_nearest_yen(self) -> None:
        # 3.6% of 110 = 3.96 -> 4, 3.6% of 100 = 3.6 -> 4, 3.6% of 40 = 1.44 -> 1
        assert percentage_of(110, 360) == 4
        assert percentage_of(100, 360) == 4
        assert percentage_of(40, 360) == 1

    def test_zero_amount(self) -> None:
        assert percentage_of(0, 360) == 0

    def test_zero_rate(self) -> None:
        assert percentage_of(10000, 0) == 0

    def test_full_rate(self) -> None:
        assert percentage_of(777, 10000) == 777

    def test_negative_amount_raises(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            percentage_of(-1, 360)

    def test_negative_rate_raises(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            percentage_of(100, -1)
