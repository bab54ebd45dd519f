import logging
import time
from decimal import Decimal
from typing import List, Optional

from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.table import Table

from liquidity_selector.pricing import format_price
from liquidity_selector.selector import LiquiditySelector, SelectorView
from liquidity_selector.sources.base import TickSource
from liquidity_selector.types import Bucket, ContainerSize

MAX_BAR_LENGTH = 60


def _bar(value: Decimal, height: Decimal) -> str:
    if height <= 0:
        return ""
    bar_length = int(value * MAX_BAR_LENGTH / height)
    return "▮" * min(max(bar_length, 1 if value > 0 else 0), MAX_BAR_LENGTH)


def _build_bucket_table(title: str, buckets: List[Bucket], height: Decimal, use_a: bool) -> Table:
    table = Table(title=title, expand=True)
    table.add_column("Bucket")
    table.add_column("Reserve A", justify="right")
    table.add_column("Reserve B", justify="right")
    table.add_column("Bar")
    for bucket in buckets:
        label = f"{format_price(bucket.lower_bound)} - {format_price(bucket.upper_bound)}"
        bar_value = bucket.reserve_a if use_a else bucket.reserve_b
        table.add_row(
            label,
            f"{bucket.reserve_a:,.2f}",
            f"{bucket.reserve_b:,.2f}",
            _bar(bar_value, height),
        )
    return table


def build_depth_tables(view: SelectorView) -> Group:
    token_a_table = _build_bucket_table(
        f"{view.token_a.symbol} liquidity (below price)", view.token_a_buckets, view.graph_height, True
    )
    token_b_table = _build_bucket_table(
        f"{view.token_b.symbol} liquidity (above price)", view.token_b_buckets, view.graph_height, False
    )
    token_b_table.caption = (
        f"Current Price: {format_price(view.current_price)}  "
        f"Extent: {format_price(view.extent.start)} - {format_price(view.extent.end)}  "
        f"Ratio: {format_price(view.bucket_ratio)}  "
        f"Axis: {' '.join(label.label for label in view.axis_labels)}"
    )
    return Group(token_a_table, token_b_table)


def _build_user_tick_panel(view: SelectorView) -> Panel:
    lines = []
    for display in view.tick_displays:
        flags = [
            "A" if display.is_token_a else "B",
            "selected" if display.is_selected else "",
            f"diff {display.diff}" if display.diff else "",
            "price warning" if display.price_warning else "",
        ]
        lines.append(
            f"#{display.index + 1} @ {format_price(display.tick.price)} "
            f"height {display.value:.3f} ({', '.join(flag for flag in flags if flag)})"
        )
    return Panel("\n".join(lines) or "No user ticks", title="User Ticks", border_style="blue")


def build_frame(view: SelectorView) -> Group:
    if not view.is_available:
        return Group(Panel("Chart is not currently available", border_style="red"))
    return Group(build_depth_tables(view), _build_user_tick_panel(view))


def _refresh(selector: LiquiditySelector, source: TickSource, container: ContainerSize) -> SelectorView:
    return selector.view(source.fetch_ticks(), container, current_price=source.current_price())


def render_once(
    selector: LiquiditySelector,
    source: TickSource,
    container: ContainerSize,
    console: Optional[Console] = None,
) -> SelectorView:
    view = _refresh(selector, source, container)
    (console or Console()).print(build_frame(view))
    return view


def start_ui(
    selector: LiquiditySelector,
    source: TickSource,
    container: ContainerSize,
    refresh_seconds: float = 1.0,
) -> None:
    with Live(refresh_per_second=2, screen=False) as live:
        while True:
            view = _refresh(selector, source, container)
            logging.info(
                "Refreshed %s/%s: %d ticks, %d buckets",
                view.token_a.symbol,
                view.token_b.symbol,
                len(view.ticks),
                len(view.token_a_buckets) + len(view.token_b_buckets),
            )
            live.update(build_frame(view))
            time.sleep(refresh_seconds)
