from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, List, Optional, Sequence


@dataclass(frozen=True)
class Token:
    symbol: str
    address: str = ""
    decimals: int = 18


@dataclass(frozen=True)
class RawTick:
    token0: Token
    token1: Token
    reserve0: Decimal
    reserve1: Decimal
    tick_index: int
    price: Decimal  # token1 per token0
    fee: Decimal
    fee_index: int


@dataclass(frozen=True)
class Tick:
    token_a: Token
    token_b: Token
    reserve_a: Decimal
    reserve_b: Decimal
    tick_index: int
    price: Decimal  # tokenB per tokenA
    fee: Decimal
    fee_index: int

    @property
    def total_reserves(self) -> Decimal:
        return self.reserve_a + self.reserve_b

    @property
    def has_finite_reserves(self) -> bool:
        return self.reserve_a.is_finite() and self.reserve_b.is_finite()


TickGroup = List[Tick]
UserTickGroup = Sequence[Optional[Tick]]
UserTicksTransform = Callable[[UserTickGroup], List[Optional[Tick]]]


@dataclass(frozen=True)
class BucketBounds:
    lower_bound: Decimal
    upper_bound: Decimal


@dataclass(frozen=True)
class Bucket:
    lower_bound: Decimal
    upper_bound: Decimal
    reserve_a: Decimal
    reserve_b: Decimal


@dataclass(frozen=True)
class GraphExtent:
    start: Decimal
    end: Decimal

    @property
    def is_empty(self) -> bool:
        return self.end.is_zero()


@dataclass(frozen=True)
class ContainerSize:
    width: float
    height: float


@dataclass(frozen=True)
class FeeTier:
    label: str
    fee: Decimal
    description: str


@dataclass(frozen=True)
class AxisLabel:
    value: Decimal
    decimal_places: int
    label: str
