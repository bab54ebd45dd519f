import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional

from liquidity_selector.decimals import to_decimal
from liquidity_selector.pricing import tick_to_price
from liquidity_selector.sources.base import TickSource
from liquidity_selector.types import RawTick, Token

logger = logging.getLogger(__name__)


def _load_snapshot(path: Path) -> dict:
    if not path.exists():
        raise FileNotFoundError(f"Snapshot file not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Snapshot {path} must contain a JSON object")
    return data


def _parse_tokens(entries: List[dict]) -> Dict[str, Token]:
    tokens: Dict[str, Token] = {}
    for entry in entries:
        symbol = entry.get("symbol")
        if not symbol:
            raise ValueError(f"Token entry without symbol: {entry}")
        tokens[symbol] = Token(
            symbol=symbol,
            address=entry.get("address", ""),
            decimals=int(entry.get("decimals", 18)),
        )
    return tokens


def _field(entry: Dict[str, Any], name: str) -> Any:
    if name not in entry:
        raise ValueError(f"Tick entry missing '{name}': {entry}")
    return entry[name]


class JsonSnapshotSource(TickSource):
    """Reads ticks from a JSON snapshot written by an indexer export.

    The file is re-read on every fetch so an updated export shows up on the
    next refresh. Tokens missing from the ``tokens`` list get the configured
    decimals. Decimal quantities are stored as strings; a tick without a
    ``price`` gets one derived from its tick index.
    """

    def __init__(self, path: Path, token_decimals: Optional[Dict[str, int]] = None):
        super().__init__(token_decimals)
        self.path = Path(path)

    def _tokens_from(self, data: dict) -> Dict[str, Token]:
        return _parse_tokens(data.get("tokens", []))

    def tokens(self) -> Dict[str, Token]:
        return self._tokens_from(_load_snapshot(self.path))

    def _resolve(self, tokens: Dict[str, Token], symbol: str) -> Token:
        return tokens.get(symbol) or self.fallback_token(symbol)

    def _parse_tick(self, tokens: Dict[str, Token], entry: Dict[str, Any]) -> RawTick:
        token0 = self._resolve(tokens, _field(entry, "token0"))
        token1 = self._resolve(tokens, _field(entry, "token1"))
        tick_index = int(_field(entry, "tick_index"))
        if entry.get("price") is not None:
            price = to_decimal(entry["price"])
        else:
            price = tick_to_price(tick_index, token0.decimals, token1.decimals)
        return RawTick(
            token0=token0,
            token1=token1,
            reserve0=to_decimal(_field(entry, "reserve0")),
            reserve1=to_decimal(_field(entry, "reserve1")),
            tick_index=tick_index,
            price=price,
            fee=to_decimal(entry.get("fee", "0")),
            fee_index=int(entry.get("fee_index", 0)),
        )

    def fetch_ticks(self) -> List[RawTick]:
        data = _load_snapshot(self.path)
        tokens = self._tokens_from(data)
        ticks = [self._parse_tick(tokens, entry) for entry in data.get("ticks", [])]
        logger.debug("Loaded %d ticks from %s", len(ticks), self.path)
        return ticks

    def current_price(self) -> Optional[Decimal]:
        raw_price = _load_snapshot(self.path).get("current_price")
        if raw_price is None:
            return None
        return to_decimal(raw_price)
