import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Iterable, List, Optional, Tuple

from liquidity_selector import decimals
from liquidity_selector.axis import axis_labels
from liquidity_selector.buckets import bucket_count, bucket_ratio, fill_buckets, generate_buckets, graph_height
from liquidity_selector.config import AppConfig
from liquidity_selector.coordinates import CoordinateMapper
from liquidity_selector.decimals import ONE
from liquidity_selector.drag import DragPermissions, RangeDragController, SetRange, SetUserTicks, TickDragController
from liquidity_selector.extent import data_extent, initial_extent, resolve_extent
from liquidity_selector.normalizer import filter_fee_tier, normalize_ticks
from liquidity_selector.tick_display import TickDisplay, build_tick_displays
from liquidity_selector.types import (
    AxisLabel,
    Bucket,
    ContainerSize,
    GraphExtent,
    RawTick,
    Tick,
    TickGroup,
    Token,
    UserTickGroup,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectorView:
    token_a: Token
    token_b: Token
    current_price: Decimal
    ticks: TickGroup
    fee_ticks: TickGroup
    data_extent: GraphExtent
    extent: GraphExtent
    bucket_count: int
    bucket_ratio: Decimal
    token_a_buckets: List[Bucket]
    token_b_buckets: List[Bucket]
    graph_height: Decimal
    mapper: CoordinateMapper
    axis_labels: List[AxisLabel]
    user_ticks: Tuple[Optional[Tick], ...]
    background_ticks: Tuple[Optional[Tick], ...]
    tick_displays: List[TickDisplay]

    @property
    def is_available(self) -> bool:
        return not self.extent.is_empty


def _current_price(price: Optional[Decimal]) -> Decimal:
    if price is None or not price.is_finite() or price <= 0:
        logger.debug("No usable current price (%s), defaulting to 1", price)
        return ONE
    return price


class LiquiditySelector:
    """Derives the complete chart state for one token pair.

    Every call to :meth:`view` recomputes from its inputs; nothing is cached
    between calls.
    """

    def __init__(self, config: AppConfig, token_a: Token, token_b: Token):
        self.config = config
        self.token_a = token_a
        self.token_b = token_b

    def view(
        self,
        raw_ticks: Iterable[RawTick],
        container: ContainerSize,
        current_price: Optional[Decimal] = None,
        user_ticks: UserTickGroup = (),
        background_ticks: Optional[UserTickGroup] = None,
        selected_index: Optional[int] = None,
        view_only_user_ticks: bool = False,
        extent_override: Optional[GraphExtent] = None,
    ) -> SelectorView:
        chart = self.config.chart
        price = _current_price(current_price)
        background = tuple(user_ticks if background_ticks is None else background_ticks)

        ticks = normalize_ticks(raw_ticks, self.token_a, self.token_b)
        fee_ticks = filter_fee_tier(ticks, self.config.pair.fee_tier)

        data = data_extent(ticks)
        extent = extent_override or resolve_extent(initial_extent(price), data, user_ticks, view_only_user_ticks)

        count = bucket_count(container.width, chart.bucket_width_px)
        ratio = bucket_ratio(extent, count)
        empty_a, empty_b = generate_buckets(price, ratio, count, data)
        token_a_buckets = fill_buckets(empty_a, fee_ticks)
        token_b_buckets = fill_buckets(empty_b, fee_ticks)
        # height comes from every fee tier so the scale holds when switching tiers
        height = graph_height(fill_buckets(empty_a, ticks), fill_buckets(empty_b, ticks))

        mapper = CoordinateMapper.build(container, extent, height, chart.x_padding, chart.y_padding)
        axis_padding = decimals.to_decimal(chart.axis_padding_ratio)
        labels = axis_labels(
            decimals.divide(decimals.floor_significant(extent.start, 2), axis_padding),
            decimals.multiply(decimals.ceil_significant(extent.end, 2), axis_padding),
        )
        displays = build_tick_displays(user_ticks, background, mapper, price, selected_index)

        logger.debug(
            "View %s/%s: %d ticks, %d+%d buckets, ratio %s",
            self.token_a.symbol,
            self.token_b.symbol,
            len(ticks),
            len(token_a_buckets),
            len(token_b_buckets),
            ratio,
        )
        return SelectorView(
            token_a=self.token_a,
            token_b=self.token_b,
            current_price=price,
            ticks=ticks,
            fee_ticks=fee_ticks,
            data_extent=data,
            extent=extent,
            bucket_count=count,
            bucket_ratio=ratio,
            token_a_buckets=token_a_buckets,
            token_b_buckets=token_b_buckets,
            graph_height=height,
            mapper=mapper,
            axis_labels=labels,
            user_ticks=tuple(user_ticks),
            background_ticks=background,
            tick_displays=displays,
        )

    def permissions(self) -> DragPermissions:
        drag = self.config.drag
        return DragPermissions(
            can_move_up=drag.can_move_up,
            can_move_down=drag.can_move_down,
            can_move_x=drag.can_move_x,
        )

    def tick_drag_controller(
        self,
        view: SelectorView,
        set_user_ticks: SetUserTicks,
        set_user_tick_selected: Optional[Callable[[int], None]] = None,
        permissions: Optional[DragPermissions] = None,
    ) -> TickDragController:
        return TickDragController(
            view.mapper,
            set_user_ticks,
            background_ticks=view.background_ticks,
            permissions=permissions or self.permissions(),
            set_user_tick_selected=set_user_tick_selected,
            speed_factor=self.config.drag.speed_factor,
            price_digits=self.config.price_significant_digits,
        )

    def range_drag_controller(
        self,
        view: SelectorView,
        set_range_min: SetRange,
        set_range_max: SetRange,
    ) -> RangeDragController:
        return RangeDragController(
            view.mapper,
            set_range_min,
            set_range_max,
            bucket_ratio=view.bucket_ratio,
            price_digits=self.config.price_significant_digits,
        )
