import json
from decimal import Decimal

import pytest

from liquidity_selector.config import load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in (
        "TOKEN_A_SYMBOL",
        "TOKEN_B_SYMBOL",
        "FEE_TIER",
        "BUCKET_WIDTH_PX",
        "X_PADDING",
        "CAN_MOVE_X",
        "CONTAINER_WIDTH",
        "SNAPSHOT_PATH",
    ):
        monkeypatch.delenv(key, raising=False)


class TestLoadConfig:
    def test_defaults_without_file(self, tmp_path):
        config = load_config(tmp_path / "missing.json")
        assert config.chart.bucket_width_px == 50
        assert config.chart.x_padding == 0.1
        assert config.drag.speed_factor == 5
        assert not config.drag.can_move_x
        assert config.pair.fee_tier is None
        assert config.price_significant_digits == 6

    def test_file_values(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps(
                {
                    "pair": {"token_a": "ATOM", "token_b": "USDC", "fee_tier": "0.002"},
                    "chart": {"container_width": 1200},
                    "drag": {"can_move_x": True},
                }
            )
        )
        config = load_config(path)
        assert config.pair.token_a == "ATOM"
        assert config.pair.fee_tier == Decimal("0.002")
        assert config.chart.container_width == 1200
        assert config.drag.can_move_x

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"pair": {"token_a": "ATOM"}, "chart": {"bucket_width_px": 40}}))
        monkeypatch.setenv("TOKEN_A_SYMBOL", "OSMO")
        monkeypatch.setenv("BUCKET_WIDTH_PX", "25")
        monkeypatch.setenv("CAN_MOVE_X", "yes")
        config = load_config(path)
        assert config.pair.token_a == "OSMO"
        assert config.chart.bucket_width_px == 25
        assert config.drag.can_move_x

    def test_unparseable_env_falls_back(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CONTAINER_WIDTH", "wide")
        assert load_config(tmp_path / "missing.json").chart.container_width == 800

    def test_invalid_padding_rejected(self, tmp_path, monkeypatch):
        monkeypatch.setenv("X_PADDING", "0.6")
        with pytest.raises(ValueError, match="X_PADDING"):
            load_config(tmp_path / "missing.json")

    def test_invalid_fee_tier_rejected(self, tmp_path, monkeypatch):
        monkeypatch.setenv("FEE_TIER", "cheap")
        with pytest.raises(ValueError, match="FEE_TIER"):
            load_config(tmp_path / "missing.json")
