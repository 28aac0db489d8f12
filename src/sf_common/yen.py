"""Integer arithmetic utilities for yen amounts.

Yen has no minor unit: all prices, fees and totals are int. No float, no Decimal.
Percentages are carried as basis points (1% = 100 bps).
"""


def yen_to_display(amount: int) -> str:
    """Convert yen to display string: 12800 -> '¥12,800', -300 -> '-¥300'."""
    if amount < 0:
        return f"-¥{-amount:,}"
    return f"¥{amount:,}"


def percentage_of(amount: int, rate_bps: int) -> int:
    """Round-half-up percentage of a non-negative amount.

    result = round(amount * rate_bps / 10000), halves rounded up.
    Using integer arithmetic: (a * bps + 5000) // 10000
    """
    if amount < 0 or rate_bps < 0:
        raise ValueError(f"amount and rate must be non-negative, got {amount}, {rate_bps}")
    if amount == 0 or rate_bps == 0:
        return 0
    return (amount * rate_bps + 5000) // 10000

