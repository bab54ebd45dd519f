import logging
import math
from bisect import bisect_left, bisect_right
from decimal import Decimal
from typing import Iterable, List, Sequence, Tuple

from liquidity_selector import decimals
from liquidity_selector.decimals import ONE, ZERO
from liquidity_selector.types import Bucket, BucketBounds, GraphExtent, TickGroup

logger = logging.getLogger(__name__)

DEFAULT_BUCKET_WIDTH_PX = 50


def bucket_count(container_width: float, bucket_width_px: float = DEFAULT_BUCKET_WIDTH_PX) -> int:
    if bucket_width_px <= 0:
        return 1
    return math.ceil(max(container_width, 0) / bucket_width_px) + 1


def bucket_ratio(extent: GraphExtent, count: int) -> Decimal:
    if count <= 0:
        return ONE
    x_min = decimals.floor_significant(extent.start, 1)
    x_max = decimals.ceil_significant(extent.end, 1)
    if not (x_min.is_finite() and x_max.is_finite()) or x_min <= 0 or x_max <= x_min:
        logger.debug("Degenerate extent %s..%s, using unit bucket ratio", extent.start, extent.end)
        return ONE
    width = decimals.divide(x_max, x_min)
    return decimals.exp(decimals.divide(decimals.ln(width), Decimal(count)))


def generate_buckets(
    current_price: Decimal,
    ratio: Decimal,
    count: int,
    data_extent: GraphExtent,
) -> Tuple[List[BucketBounds], List[BucketBounds]]:
    # each side stops at the two-significant-digit data bounds, after at most count steps
    lower_limit = decimals.floor_significant(data_extent.start, 2)
    upper_limit = decimals.ceil_significant(data_extent.end, 2)

    token_a_buckets: List[BucketBounds] = []
    value = current_price
    for _ in range(count):
        if value <= lower_limit:
            break
        next_value = decimals.divide(value, ratio)
        token_a_buckets.insert(0, BucketBounds(lower_bound=next_value, upper_bound=value))
        if ratio == ONE:
            break
        value = next_value

    token_b_buckets: List[BucketBounds] = []
    value = current_price
    for _ in range(count):
        if value >= upper_limit:
            break
        next_value = decimals.multiply(value, ratio)
        token_b_buckets.append(BucketBounds(lower_bound=value, upper_bound=next_value))
        if ratio == ONE:
            break
        value = next_value

    return token_a_buckets, token_b_buckets


def _sum(values: Sequence[Decimal]) -> Decimal:
    total = ZERO
    for value in values:
        total = decimals.add(total, value)
    return total


def fill_buckets(bounds: Iterable[BucketBounds], ticks: TickGroup) -> List[Bucket]:
    """Sum tick reserves per bucket, both bounds inclusive; empty buckets are dropped."""
    ordered = sorted(ticks, key=lambda tick: tick.price)
    prices = [tick.price for tick in ordered]
    reserves_a = [tick.reserve_a for tick in ordered]
    reserves_b = [tick.reserve_b for tick in ordered]

    filled: List[Bucket] = []
    for bucket in bounds:
        start = bisect_left(prices, bucket.lower_bound)
        end = bisect_right(prices, bucket.upper_bound)
        reserve_a = _sum(reserves_a[start:end])
        reserve_b = _sum(reserves_b[start:end])
        if reserve_a.is_zero() and reserve_b.is_zero():
            continue
        filled.append(
            Bucket(
                lower_bound=bucket.lower_bound,
                upper_bound=bucket.upper_bound,
                reserve_a=reserve_a,
                reserve_b=reserve_b,
            )
        )
    return filled


def graph_height(*bucket_groups: Sequence[Bucket]) -> Decimal:
    height = ZERO
    for buckets in bucket_groups:
        for bucket in buckets:
            height = max(height, bucket.reserve_a, bucket.reserve_b)
    return height
