from decimal import Decimal

import pytest

from liquidity_selector.types import RawTick, Tick, Token

TOKEN_A = Token(symbol="TOKA", address="0xa", decimals=6)
TOKEN_B = Token(symbol="TOKB", address="0xb", decimals=6)
TOKEN_C = Token(symbol="TOKC", address="0xc", decimals=6)


def raw_tick(price, reserve0="0", reserve1="0", token0=TOKEN_A, token1=TOKEN_B, tick_index=0, fee_index=1):
    return RawTick(
        token0=token0,
        token1=token1,
        reserve0=Decimal(reserve0),
        reserve1=Decimal(reserve1),
        tick_index=tick_index,
        price=Decimal(price),
        fee=Decimal("0.0005"),
        fee_index=fee_index,
    )


def tick(price, reserve_a="0", reserve_b="0", tick_index=0, fee_index=1):
    return Tick(
        token_a=TOKEN_A,
        token_b=TOKEN_B,
        reserve_a=Decimal(reserve_a),
        reserve_b=Decimal(reserve_b),
        tick_index=tick_index,
        price=Decimal(price),
        fee=Decimal("0.0005"),
        fee_index=fee_index,
    )


@pytest.fixture
def token_a():
    return TOKEN_A


@pytest.fixture
def token_b():
    return TOKEN_B
