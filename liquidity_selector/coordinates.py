import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Union

from liquidity_selector import decimals
from liquidity_selector.types import ContainerSize, GraphExtent

X_PADDING = 0.1
Y_PADDING = 0.05
# keeps exp() inside the Decimal exponent range
MAX_LOG_PRICE = 2_000_000.0

Value = Union[Decimal, float, int]


@dataclass(frozen=True)
class CoordinateMapper:
    container: ContainerSize
    x_min: float
    x_max: float
    graph_height: float
    x_padding: float = X_PADDING
    y_padding: float = Y_PADDING

    @classmethod
    def build(
        cls,
        container: ContainerSize,
        extent: GraphExtent,
        graph_height: Decimal,
        x_padding: float = X_PADDING,
        y_padding: float = Y_PADDING,
    ) -> "CoordinateMapper":
        x_min = decimals.floor_significant(extent.start, 2)
        x_max = decimals.ceil_significant(extent.end, 2)
        return cls(
            container=container,
            x_min=float(x_min),
            x_max=float(x_max),
            graph_height=float(graph_height),
            x_padding=x_padding,
            y_padding=y_padding,
        )

    @property
    def left_padding(self) -> float:
        return self.container.width * self.x_padding

    @property
    def inner_width(self) -> float:
        return self.container.width * (1 - 2 * self.x_padding)

    @property
    def bottom_padding(self) -> float:
        return self.container.height * self.y_padding

    @property
    def inner_height(self) -> float:
        return self.container.height * (1 - 2 * self.y_padding)

    def _has_log_range(self) -> bool:
        return 0 < self.x_min < self.x_max

    def plot_x(self, price: Value) -> float:
        x = float(price)
        if not self._has_log_range():
            return self.left_padding + self.inner_width / 2
        if not x > 0:
            return self.left_padding
        log_min = math.log(self.x_min)
        return self.left_padding + self.inner_width * (math.log(x) - log_min) / (
            math.log(self.x_max) - log_min
        )

    def plot_x_inverse(self, pixel: float) -> Decimal:
        if not self._has_log_range() or self.inner_width == 0:
            return decimals.to_decimal(self.x_min)
        log_min = math.log(self.x_min)
        log_price = (pixel - self.left_padding) * (math.log(self.x_max) - log_min) / self.inner_width + log_min
        log_price = min(max(log_price, -MAX_LOG_PRICE), MAX_LOG_PRICE)
        return decimals.exp(decimals.to_decimal(log_price))

    # vertical coordinates grow negative upward from the baseline at -bottom_padding
    def plot_y(self, value: Value) -> float:
        if self.graph_height == 0:
            return -self.bottom_padding
        return -self.bottom_padding - self.inner_height * float(value) / self.graph_height

    def percent_y(self, fraction: Value) -> float:
        return -self.bottom_padding - self.inner_height * float(fraction)

    def decade_width(self) -> float:
        return self.plot_x(10) - self.plot_x(1)
