import json
import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional


@dataclass
class ChartConfig:
    bucket_width_px: float = 50
    x_padding: float = 0.1
    y_padding: float = 0.05
    container_width: float = 800
    container_height: float = 300
    axis_padding_ratio: float = 1.2


@dataclass
class DragConfig:
    speed_factor: float = 5
    can_move_up: bool = False
    can_move_down: bool = False
    can_move_x: bool = False


@dataclass
class PairConfig:
    token_a: str
    token_b: str
    token_a_decimals: int = 18
    token_b_decimals: int = 18
    fee_tier: Optional[Decimal] = None  # e.g. 0.0005 for the 0.05% tier


@dataclass
class AppConfig:
    pair: PairConfig
    chart: ChartConfig = field(default_factory=ChartConfig)
    drag: DragConfig = field(default_factory=DragConfig)
    snapshot_path: str = "snapshot.json"
    refresh_seconds: float = 1.0
    price_significant_digits: int = 6
    log_level: str = "INFO"


def _load_config_from_file(path: Path) -> dict:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def _get_env_or_default(key: str, fallback: Optional[str]) -> Optional[str]:
    return os.getenv(key, fallback)


def _get_int_env(key: str, fallback: Optional[int], default: int) -> int:
    raw_value = os.getenv(key)
    if raw_value is not None:
        try:
            return int(raw_value)
        except ValueError:
            pass
    if fallback is not None:
        try:
            return int(fallback)
        except (TypeError, ValueError):
            pass
    return default


def _get_float_env(key: str, fallback: Optional[float], default: float) -> float:
    raw_value = os.getenv(key)
    if raw_value is not None:
        try:
            return float(raw_value)
        except ValueError:
            pass
    if fallback is not None:
        try:
            return float(fallback)
        except (TypeError, ValueError):
            pass
    return default


def _get_bool_env(key: str, fallback: Optional[bool]) -> bool:
    raw_value = os.getenv(key)
    if raw_value is not None:
        return raw_value.strip().lower() in ("1", "true", "yes", "on")
    return bool(fallback)


def _get_decimal_env(key: str, fallback) -> Optional[Decimal]:
    raw_value = os.getenv(key, fallback)
    if raw_value in (None, ""):
        return None
    try:
        return Decimal(str(raw_value))
    except InvalidOperation:
        raise ValueError(f"{key} must be a decimal number, got {raw_value!r}")


def validate_config(config: AppConfig) -> AppConfig:
    if config.chart.bucket_width_px <= 0:
        raise ValueError("BUCKET_WIDTH_PX must be positive")
    for name, padding in (("X_PADDING", config.chart.x_padding), ("Y_PADDING", config.chart.y_padding)):
        if not 0 <= padding < 0.5:
            raise ValueError(f"{name} must be within [0, 0.5), got {padding}")
    if config.chart.container_width < 0 or config.chart.container_height < 0:
        raise ValueError("Container dimensions cannot be negative")
    if config.price_significant_digits <= 0:
        raise ValueError("PRICE_SIGNIFICANT_DIGITS must be positive")
    return config


def build_config(config_data: dict) -> AppConfig:
    pair_data = config_data.get("pair", {})
    chart_data = config_data.get("chart", {})
    drag_data = config_data.get("drag", {})
    chart_defaults = ChartConfig()
    drag_defaults = DragConfig()
    return AppConfig(
        pair=PairConfig(
            token_a=_get_env_or_default("TOKEN_A_SYMBOL", pair_data.get("token_a", "TOKA")),
            token_b=_get_env_or_default("TOKEN_B_SYMBOL", pair_data.get("token_b", "TOKB")),
            token_a_decimals=_get_int_env("TOKEN_A_DECIMALS", pair_data.get("token_a_decimals"), 18),
            token_b_decimals=_get_int_env("TOKEN_B_DECIMALS", pair_data.get("token_b_decimals"), 18),
            fee_tier=_get_decimal_env("FEE_TIER", pair_data.get("fee_tier")),
        ),
        chart=ChartConfig(
            bucket_width_px=_get_float_env(
                "BUCKET_WIDTH_PX", chart_data.get("bucket_width_px"), chart_defaults.bucket_width_px
            ),
            x_padding=_get_float_env("X_PADDING", chart_data.get("x_padding"), chart_defaults.x_padding),
            y_padding=_get_float_env("Y_PADDING", chart_data.get("y_padding"), chart_defaults.y_padding),
            container_width=_get_float_env(
                "CONTAINER_WIDTH", chart_data.get("container_width"), chart_defaults.container_width
            ),
            container_height=_get_float_env(
                "CONTAINER_HEIGHT", chart_data.get("container_height"), chart_defaults.container_height
            ),
            axis_padding_ratio=_get_float_env(
                "AXIS_PADDING_RATIO", chart_data.get("axis_padding_ratio"), chart_defaults.axis_padding_ratio
            ),
        ),
        drag=DragConfig(
            speed_factor=_get_float_env("DRAG_SPEED_FACTOR", drag_data.get("speed_factor"), drag_defaults.speed_factor),
            can_move_up=_get_bool_env("CAN_MOVE_UP", drag_data.get("can_move_up")),
            can_move_down=_get_bool_env("CAN_MOVE_DOWN", drag_data.get("can_move_down")),
            can_move_x=_get_bool_env("CAN_MOVE_X", drag_data.get("can_move_x")),
        ),
        snapshot_path=_get_env_or_default("SNAPSHOT_PATH", config_data.get("snapshot_path", "snapshot.json")),
        refresh_seconds=_get_float_env("REFRESH_SECONDS", config_data.get("refresh_seconds"), 1.0),
        price_significant_digits=_get_int_env(
            "PRICE_SIGNIFICANT_DIGITS", config_data.get("price_significant_digits"), 6
        ),
        log_level=_get_env_or_default("LOG_LEVEL", config_data.get("log_level", "INFO")),
    )


_CONFIG_PATH = Path(__file__).with_name("config.json")


def load_config(path: Path = _CONFIG_PATH) -> AppConfig:
    return validate_config(build_config(_load_config_from_file(path)))
