from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Dict, List, Optional

from liquidity_selector.types import RawTick, Token

DEFAULT_TOKEN_DECIMALS = 18


class TickSource(ABC):
    """Supplier of raw ticks and the pair's market price."""

    def __init__(self, token_decimals: Optional[Dict[str, int]] = None):
        self.token_decimals = dict(token_decimals or {})

    @abstractmethod
    def fetch_ticks(self) -> List[RawTick]:
        ...

    @abstractmethod
    def current_price(self) -> Optional[Decimal]:
        ...

    def tokens(self) -> Dict[str, Token]:
        return {}

    def fallback_token(self, symbol: str) -> Token:
        return Token(symbol=symbol, decimals=self.token_decimals.get(symbol, DEFAULT_TOKEN_DECIMALS))

    def token(self, symbol: str) -> Token:
        return self.tokens().get(symbol) or self.fallback_token(symbol)
