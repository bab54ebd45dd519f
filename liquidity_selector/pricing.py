from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional

from liquidity_selector import decimals
from liquidity_selector.types import FeeTier

TICK_BASE = Decimal("1.0001")
DEFAULT_PRICE_SIGNIFICANT_DIGITS = 6

FEE_TIERS: List[FeeTier] = [
    FeeTier(label="0.01%", fee=Decimal("0.0001"), description="Best for very stable pairs"),
    FeeTier(label="0.05%", fee=Decimal("0.0005"), description="Best for stable pairs"),
    FeeTier(label="0.20%", fee=Decimal("0.002"), description="Best for most assets"),
    FeeTier(label="1.00%", fee=Decimal("0.01"), description="Best for exotic assets"),
]


def tick_to_price(tick: int, token0_decimals: int = 0, token1_decimals: int = 0) -> Decimal:
    decimal_correction = Decimal(1).scaleb(token0_decimals - token1_decimals)
    return decimals.multiply(decimals.power(TICK_BASE, Decimal(tick)), decimal_correction)


def fee_tier_for_index(fee_index: int) -> Optional[FeeTier]:
    if 0 <= fee_index < len(FEE_TIERS):
        return FEE_TIERS[fee_index]
    return None


def format_price(price: Decimal, significant_digits: int = DEFAULT_PRICE_SIGNIFICANT_DIGITS) -> str:
    """Standard price display: rounded half-up to a fixed number of significant digits."""
    rounded = decimals.round_significant(price, significant_digits, ROUND_HALF_UP)
    return decimals.to_plain_string(rounded)
