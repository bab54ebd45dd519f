from decimal import ROUND_DOWN, ROUND_UP, Context, Decimal, InvalidOperation, localcontext
from typing import Union

DECIMAL_PRECISION = 100

CONTEXT = Context(prec=DECIMAL_PRECISION)

ZERO = Decimal(0)
ONE = Decimal(1)

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    # floats go through repr to avoid binary noise
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return Decimal("NaN")


def is_finite(value: Decimal) -> bool:
    return value.is_finite()


def divide(numerator: Decimal, denominator: Decimal) -> Decimal:
    with localcontext(CONTEXT):
        return numerator / denominator


def multiply(a: Decimal, b: Decimal) -> Decimal:
    with localcontext(CONTEXT):
        return a * b


def add(a: Decimal, b: Decimal) -> Decimal:
    with localcontext(CONTEXT):
        return a + b


def reciprocal(value: Decimal) -> Decimal:
    return divide(ONE, value)


def ln(value: Decimal) -> Decimal:
    with localcontext(CONTEXT):
        return value.ln()


def exp(value: Decimal) -> Decimal:
    with localcontext(CONTEXT):
        return value.exp()


def power(base: Decimal, exponent: Decimal) -> Decimal:
    with localcontext(CONTEXT):
        return base ** exponent


def round_significant(value: Decimal, digits: int, rounding: str = ROUND_DOWN) -> Decimal:
    """ROUND_DOWN truncates toward zero, ROUND_UP rounds away from it."""
    if not value.is_finite() or value.is_zero():
        return value
    quantum = Decimal(1).scaleb(value.adjusted() - digits + 1)
    with localcontext(CONTEXT):
        return value.quantize(quantum, rounding=rounding)


def floor_significant(value: Decimal, digits: int) -> Decimal:
    return round_significant(value, digits, ROUND_DOWN)


def ceil_significant(value: Decimal, digits: int) -> Decimal:
    return round_significant(value, digits, ROUND_UP)


def to_plain_string(value: Decimal) -> str:
    if not value.is_finite():
        return str(value)
    if value.is_zero():
        return "0"
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
