from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Sequence

from liquidity_selector import decimals
from liquidity_selector.coordinates import CoordinateMapper
from liquidity_selector.decimals import ZERO
from liquidity_selector.types import Tick, UserTickGroup

FULL_HEIGHT = Decimal("0.925")
HIT_HALF_WIDTH = 7.5
HIT_TOP_MARGIN = 25.0
HIT_BOTTOM_MARGIN = 10.0


@dataclass(frozen=True)
class HitRegion:
    left: float
    top: float
    right: float
    bottom: float

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x <= self.right and self.top <= y <= self.bottom


@dataclass(frozen=True)
class TickDisplay:
    index: int
    tick: Tick
    background: Tick
    value: Decimal
    background_value: Decimal
    is_selected: bool
    price_warning: bool
    x: float
    hit_region: HitRegion

    @property
    def is_token_a(self) -> bool:
        return self.tick.reserve_a > 0

    @property
    def is_zero(self) -> bool:
        return self.value.is_zero()

    @property
    def has_diff(self) -> bool:
        return self.value != self.background_value

    @property
    def diff(self) -> Optional[str]:
        if not self.has_diff:
            return None
        return "negative" if self.value < self.background_value else "positive"

    @property
    def min_value(self) -> Decimal:
        return min(self.value, self.background_value)

    @property
    def max_value(self) -> Decimal:
        return max(self.value, self.background_value)


def min_max_height(tick_count: int) -> Decimal:
    return decimals.add(
        decimals.reciprocal(decimals.divide(Decimal(tick_count - 2), Decimal(3)) + 2),
        Decimal("0.4"),
    )


def scaling_factor(max_value: Decimal, cumulative: Decimal, tick_count: int) -> Decimal:
    if cumulative <= 0:
        return FULL_HEIGHT
    share = decimals.divide(max_value, cumulative)
    minimum = min_max_height(tick_count)
    if share > minimum:
        return FULL_HEIGHT
    return decimals.multiply(decimals.divide(FULL_HEIGHT, share), minimum)


def _reserves(ticks: UserTickGroup, side: str) -> List[Decimal]:
    values = []
    for tick in ticks:
        if tick is None:
            continue
        value = tick.reserve_a if side == "a" else tick.reserve_b
        if value.is_finite() and not value.is_zero():
            values.append(value)
    return values


def _sum(values: Sequence[Decimal]) -> Decimal:
    total = ZERO
    for value in values:
        total = decimals.add(total, value)
    return total


def _share(reserve: Decimal, scaling: Decimal, cumulative: Decimal) -> Decimal:
    if cumulative.is_zero():
        return ZERO
    return decimals.divide(decimals.multiply(reserve, scaling), cumulative)


def build_tick_displays(
    user_ticks: UserTickGroup,
    background_ticks: UserTickGroup,
    mapper: CoordinateMapper,
    current_price: Decimal,
    selected_index: Optional[int] = None,
) -> List[TickDisplay]:
    user_a, user_b = _reserves(user_ticks, "a"), _reserves(user_ticks, "b")
    background_a, background_b = _reserves(background_ticks, "a"), _reserves(background_ticks, "b")
    cumulative_a = max(_sum(user_a), _sum(background_a))
    cumulative_b = max(_sum(user_b), _sum(background_b))
    scaling_a = scaling_factor(max(user_a + background_a, default=ZERO), cumulative_a, len(background_a))
    scaling_b = scaling_factor(max(user_b + background_b, default=ZERO), cumulative_b, len(background_b))

    displays: List[TickDisplay] = []
    for index, tick in enumerate(user_ticks):
        if tick is None or not tick.has_finite_reserves or not tick.price.is_finite():
            continue
        background = background_ticks[index] if index < len(background_ticks) else None
        if background is None or not background.has_finite_reserves:
            background = tick
        scaling = scaling_a if background.reserve_a > 0 else scaling_b

        if tick.reserve_a > 0:
            value = _share(tick.reserve_a, scaling, cumulative_a)
        else:
            value = _share(tick.reserve_b, scaling, cumulative_b)
        if background.reserve_a > 0:
            background_value = _share(background.reserve_a, scaling, cumulative_a)
        else:
            background_value = _share(background.reserve_b, scaling, cumulative_b)

        if tick.reserve_a > 0:
            price_warning = tick.price > current_price
        else:
            price_warning = tick.price < current_price

        x = mapper.plot_x(tick.price)
        low, high = min(value, background_value), max(value, background_value)
        displays.append(
            TickDisplay(
                index=index,
                tick=tick,
                background=background,
                value=value,
                background_value=background_value,
                is_selected=index == selected_index,
                price_warning=price_warning,
                x=x,
                hit_region=HitRegion(
                    left=x - HIT_HALF_WIDTH,
                    top=mapper.percent_y(high) - HIT_TOP_MARGIN,
                    right=x + HIT_HALF_WIDTH,
                    bottom=mapper.percent_y(low) + HIT_BOTTOM_MARGIN,
                ),
            )
        )
    # selected and short ticks draw on top
    displays.sort(key=lambda display: (display.is_selected, -display.tick.total_reserves))
    return displays


def hit_test(displays: Sequence[TickDisplay], x: float, y: float) -> Optional[int]:
    for display in reversed(displays):
        if display.hit_region.contains(x, y):
            return display.index
    return None
