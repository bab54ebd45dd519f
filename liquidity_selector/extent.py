from decimal import Decimal
from typing import Optional, Tuple

from liquidity_selector import decimals
from liquidity_selector.types import GraphExtent, TickGroup, UserTickGroup

DEFAULT_EXTENT_START = decimals.divide(Decimal(1), Decimal("1.1"))
DEFAULT_EXTENT_END = Decimal("1.1")
INITIAL_SPAN_FACTOR = Decimal(4)
FOCUS_MARGIN = Decimal("0.9")


def initial_extent(current_price: Decimal) -> GraphExtent:
    """Window of a quarter to four times the current price, never narrower than 1/1.1..1.1."""
    start = decimals.divide(current_price, INITIAL_SPAN_FACTOR)
    end = decimals.multiply(current_price, INITIAL_SPAN_FACTOR)
    return GraphExtent(
        start=DEFAULT_EXTENT_START if start < DEFAULT_EXTENT_START else start,
        end=DEFAULT_EXTENT_END if end < DEFAULT_EXTENT_END else end,
    )


def data_extent(ticks: TickGroup) -> GraphExtent:
    if not ticks:
        return GraphExtent(start=DEFAULT_EXTENT_START, end=DEFAULT_EXTENT_END)
    prices = [tick.price for tick in ticks]
    return GraphExtent(start=min(prices), end=max(prices))


def user_price_range(user_ticks: UserTickGroup) -> Tuple[Optional[Decimal], Optional[Decimal]]:
    prices = [tick.price for tick in user_ticks if tick is not None and tick.price.is_finite()]
    if not prices:
        return None, None
    return min(prices), max(prices)


def resolve_extent(
    initial: GraphExtent,
    data: GraphExtent,
    user_ticks: UserTickGroup = (),
    view_only_user_ticks: bool = False,
) -> GraphExtent:
    """Visible window covering the data, the user ticks and the initial window.

    In ``view_only_user_ticks`` mode the window focuses on the user range
    instead, with a 10% margin on both sides.
    """
    min_user_price, max_user_price = user_price_range(user_ticks)
    if view_only_user_ticks and min_user_price is not None and max_user_price is not None:
        return GraphExtent(
            start=decimals.multiply(min_user_price, FOCUS_MARGIN),
            end=decimals.divide(max_user_price, FOCUS_MARGIN),
        )
    min_price = data.start
    if min_user_price is not None and min_user_price < min_price:
        min_price = min_user_price
    max_price = data.end
    if max_user_price is not None and max_user_price > max_price:
        max_price = max_user_price
    return GraphExtent(
        start=min_price if min_price < initial.start else initial.start,
        end=max_price if max_price > initial.end else initial.end,
    )
