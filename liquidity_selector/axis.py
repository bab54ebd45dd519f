import logging
from decimal import Decimal
from typing import List

from liquidity_selector.types import AxisLabel

logger = logging.getLogger(__name__)

NICE_MULTIPLES = (Decimal(1), Decimal(2), Decimal(5))


def decimal_places_for(value: Decimal) -> int:
    # value.adjusted() is floor(log10(value)) for positive values
    return max(0, -value.adjusted())


def axis_labels(x_min: Decimal, x_max: Decimal) -> List[AxisLabel]:
    """Round-number labels ``{1, 2, 5} * 10**k`` that fall inside ``[x_min, x_max]``."""
    if not (x_min.is_finite() and x_max.is_finite()) or x_min <= 0 or x_max <= x_min:
        logger.debug("No axis labels for range %s..%s", x_min, x_max)
        return []
    labels: List[AxisLabel] = []
    for exponent in range(x_min.adjusted(), x_max.adjusted() + 1):
        for multiple in NICE_MULTIPLES:
            value = multiple.scaleb(exponent)
            if x_min <= value <= x_max:
                places = decimal_places_for(value)
                labels.append(
                    AxisLabel(value=value, decimal_places=places, label=f"{value:.{places}f}")
                )
    return labels
