import logging
from decimal import Decimal
from typing import Iterable, Optional

from liquidity_selector import decimals
from liquidity_selector.pricing import fee_tier_for_index
from liquidity_selector.types import RawTick, Tick, TickGroup, Token

logger = logging.getLogger(__name__)


def _has_reserves(raw: RawTick) -> bool:
    return not raw.reserve0.is_zero() or not raw.reserve1.is_zero()


def _matches_pair(raw: RawTick, token_a: Token, token_b: Token) -> bool:
    return (raw.token0 == token_a and raw.token1 == token_b) or (
        raw.token1 == token_a and raw.token0 == token_b
    )


def _is_well_formed(raw: RawTick) -> bool:
    if not (raw.reserve0.is_finite() and raw.reserve1.is_finite() and raw.price.is_finite()):
        return False
    return raw.price > 0


def orient_tick(raw: RawTick, token_a: Token) -> Tick:
    """Express ``raw`` relative to ``token_a``.

    A reverse-ordered tick has its reserves swapped, its index negated and its
    price inverted.
    """
    if raw.token0 == token_a:
        return Tick(
            token_a=raw.token0,
            token_b=raw.token1,
            reserve_a=raw.reserve0,
            reserve_b=raw.reserve1,
            tick_index=raw.tick_index,
            price=raw.price,
            fee=raw.fee,
            fee_index=raw.fee_index,
        )
    return Tick(
        token_a=raw.token1,
        token_b=raw.token0,
        reserve_a=raw.reserve1,
        reserve_b=raw.reserve0,
        tick_index=-raw.tick_index,
        price=decimals.reciprocal(raw.price),
        fee=raw.fee,
        fee_index=raw.fee_index,
    )


def normalize_ticks(raw_ticks: Iterable[RawTick], token_a: Token, token_b: Token) -> TickGroup:
    normalized: TickGroup = []
    dropped = 0
    for raw in raw_ticks:
        if not _is_well_formed(raw):
            dropped += 1
            continue
        if not _has_reserves(raw) or not _matches_pair(raw, token_a, token_b):
            continue
        normalized.append(orient_tick(raw, token_a))
    if dropped:
        logger.debug("Dropped %d malformed ticks for %s/%s", dropped, token_a.symbol, token_b.symbol)
    return normalized


def filter_fee_tier(ticks: TickGroup, fee_tier: Optional[Decimal]) -> TickGroup:
    if not fee_tier:
        return list(ticks)
    result: TickGroup = []
    for tick in ticks:
        tier = fee_tier_for_index(tick.fee_index)
        if tier is not None and tier.fee == fee_tier:
            result.append(tick)
    return result
