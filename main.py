import argparse
import logging
from pathlib import Path
from typing import Optional

from liquidity_selector.config import AppConfig, load_config
from liquidity_selector.selector import LiquiditySelector
from liquidity_selector.sources.base import TickSource
from liquidity_selector.sources.snapshot_file import JsonSnapshotSource
from liquidity_selector.types import ContainerSize
from liquidity_selector.ui import render_once, start_ui


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )


def build_source(config: AppConfig, snapshot_path: Optional[str] = None) -> JsonSnapshotSource:
    token_decimals = {
        config.pair.token_a: config.pair.token_a_decimals,
        config.pair.token_b: config.pair.token_b_decimals,
    }
    return JsonSnapshotSource(Path(snapshot_path or config.snapshot_path), token_decimals)


def build_selector(config: AppConfig, source: TickSource) -> LiquiditySelector:
    token_a = source.token(config.pair.token_a)
    token_b = source.token(config.pair.token_b)
    return LiquiditySelector(config, token_a, token_b)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render a liquidity distribution snapshot")
    parser.add_argument("snapshot", nargs="?", help="snapshot JSON file (defaults to SNAPSHOT_PATH)")
    parser.add_argument("--once", action="store_true", help="render a single frame and exit")
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    config = load_config()
    setup_logging(config.log_level)
    source = build_source(config, args.snapshot)
    selector = build_selector(config, source)
    container = ContainerSize(width=config.chart.container_width, height=config.chart.container_height)
    if args.once:
        render_once(selector, source, container)
        return
    start_ui(selector, source, container, config.refresh_seconds)


if __name__ == "__main__":
    main()
