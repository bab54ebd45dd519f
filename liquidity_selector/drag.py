import dataclasses
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Sequence

from liquidity_selector import decimals
from liquidity_selector.coordinates import CoordinateMapper
from liquidity_selector.decimals import ONE, ZERO
from liquidity_selector.pricing import DEFAULT_PRICE_SIGNIFICANT_DIGITS, format_price
from liquidity_selector.tick_display import HitRegion, TickDisplay, hit_test
from liquidity_selector.types import Tick, UserTickGroup, UserTicksTransform

logger = logging.getLogger(__name__)

DRAG_SPEED_FACTOR = 5
POLE_FLAG_WIDTH = 0.75
POLE_MIN = "min"
POLE_MAX = "max"

SetUserTicks = Callable[[UserTicksTransform], None]
SetRange = Callable[[str], None]


@dataclass(frozen=True)
class DragPermissions:
    can_move_up: bool = False
    can_move_down: bool = False
    can_move_x: bool = False


@dataclass(frozen=True)
class TickGesture:
    index: int
    tick: Tick
    origin_x: float
    origin_y: float


@dataclass(frozen=True)
class PoleGesture:
    pole: str
    price: Decimal
    other_price: Decimal
    origin_x: float


def clamp_reserve(value: Decimal, original: Decimal, permissions: DragPermissions) -> Decimal:
    if not permissions.can_move_down and value < original:
        return original
    if not permissions.can_move_up and value > original:
        return original
    return max(value, ZERO)


class TickDragController:
    def __init__(
        self,
        mapper: CoordinateMapper,
        set_user_ticks: SetUserTicks,
        background_ticks: UserTickGroup = (),
        permissions: DragPermissions = DragPermissions(),
        set_user_tick_selected: Optional[Callable[[int], None]] = None,
        speed_factor: float = DRAG_SPEED_FACTOR,
        price_digits: int = DEFAULT_PRICE_SIGNIFICANT_DIGITS,
    ):
        self.mapper = mapper
        self.set_user_ticks = set_user_ticks
        self.background_ticks = background_ticks
        self.permissions = permissions
        self.set_user_tick_selected = set_user_tick_selected
        self.speed_factor = decimals.to_decimal(speed_factor)
        self.price_digits = price_digits
        self._gesture: Optional[TickGesture] = None

    @property
    def gesture(self) -> Optional[TickGesture]:
        return self._gesture

    @property
    def is_dragging(self) -> bool:
        return self._gesture is not None

    def press(self, displays: Sequence[TickDisplay], user_ticks: UserTickGroup, x: float, y: float) -> Optional[int]:
        index = hit_test(displays, x, y)
        if index is None or not self.start(index, user_ticks, x, y):
            return None
        return index

    def start(self, index: int, user_ticks: UserTickGroup, x: float = 0.0, y: float = 0.0) -> bool:
        tick = user_ticks[index] if 0 <= index < len(user_ticks) else None
        if tick is None or not tick.has_finite_reserves:
            return False
        if self.set_user_tick_selected is not None:
            self.set_user_tick_selected(index)
        self._gesture = TickGesture(index=index, tick=tick, origin_x=x, origin_y=y)
        return True

    def move(self, x: float, y: float) -> None:
        gesture = self._gesture
        if gesture is None:
            return
        dx = x - gesture.origin_x
        dy = y - gesture.origin_y
        if self.permissions.can_move_x and abs(dx) > abs(dy):
            transform = self._price_transform(gesture, dx)
        else:
            transform = self._value_transform(gesture, dy)
        if transform is not None:
            self.set_user_ticks(transform)

    def release(self) -> None:
        self._gesture = None

    def _cancel(self, gesture: TickGesture) -> None:
        if self._gesture is gesture:
            logger.debug("User tick %d disappeared mid-drag, ending gesture", gesture.index)
            self._gesture = None

    def _replace_selected(
        self,
        gesture: TickGesture,
        user_ticks: UserTickGroup,
        edit: Callable[[Tick], Tick],
    ) -> List[Optional[Tick]]:
        if gesture.index >= len(user_ticks) or user_ticks[gesture.index] is None:
            self._cancel(gesture)
            return list(user_ticks)
        return [
            edit(user_tick) if index == gesture.index and user_tick is not None else user_tick
            for index, user_tick in enumerate(user_ticks)
        ]

    def _price_transform(self, gesture: TickGesture, dx: float) -> Optional[UserTicksTransform]:
        decade = self.mapper.decade_width()
        if decade == 0:
            return None
        ratio = decimals.power(Decimal(10), decimals.divide(Decimal(dx), Decimal(decade)))
        new_price = Decimal(format_price(decimals.multiply(gesture.tick.price, ratio), self.price_digits))

        def transform(user_ticks: UserTickGroup) -> List[Optional[Tick]]:
            return self._replace_selected(
                gesture, user_ticks, lambda tick: dataclasses.replace(tick, price=new_price)
            )

        return transform

    def _background_for(self, gesture: TickGesture) -> Tick:
        if gesture.index < len(self.background_ticks):
            background = self.background_ticks[gesture.index]
            if background is not None and background.has_finite_reserves:
                return background
        return gesture.tick

    def _value_transform(self, gesture: TickGesture, dy: float) -> Optional[UserTicksTransform]:
        linear_pixels = self.mapper.percent_y(1) - self.mapper.percent_y(0)
        if linear_pixels == 0:
            return None
        displacement = decimals.divide(Decimal(dy), Decimal(linear_pixels))
        factor = decimals.add(ONE, decimals.multiply(self.speed_factor, displacement))
        background = self._background_for(gesture)
        reserve_a = clamp_reserve(
            decimals.multiply(gesture.tick.reserve_a, factor), background.reserve_a, self.permissions
        )
        reserve_b = clamp_reserve(
            decimals.multiply(gesture.tick.reserve_b, factor), background.reserve_b, self.permissions
        )

        def transform(user_ticks: UserTickGroup) -> List[Optional[Tick]]:
            return self._replace_selected(
                gesture,
                user_ticks,
                lambda tick: dataclasses.replace(tick, reserve_a=reserve_a, reserve_b=reserve_b),
            )

        return transform


class RangeDragController:
    def __init__(
        self,
        mapper: CoordinateMapper,
        set_range_min: SetRange,
        set_range_max: SetRange,
        bucket_ratio: Decimal,
        price_digits: int = DEFAULT_PRICE_SIGNIFICANT_DIGITS,
    ):
        self.mapper = mapper
        self.set_range_min = set_range_min
        self.set_range_max = set_range_max
        self.bucket_ratio = bucket_ratio
        self.price_digits = price_digits
        self._gesture: Optional[PoleGesture] = None

    @property
    def gesture(self) -> Optional[PoleGesture]:
        return self._gesture

    @property
    def is_dragging(self) -> bool:
        return self._gesture is not None

    # callers keep user ticks sorted by price
    @staticmethod
    def poles(user_ticks: UserTickGroup) -> Optional[Dict[str, Decimal]]:
        present = [tick for tick in user_ticks if tick is not None]
        if not present:
            return None
        return {POLE_MIN: present[0].price, POLE_MAX: present[-1].price}

    def flag_width(self) -> float:
        bucket_pixels = self.mapper.plot_x(self.bucket_ratio) - self.mapper.plot_x(1)
        return POLE_FLAG_WIDTH * bucket_pixels

    def hit_regions(self, user_ticks: UserTickGroup) -> Dict[str, HitRegion]:
        poles = self.poles(user_ticks)
        if poles is None:
            return {}
        width = self.flag_width()
        top = self.mapper.percent_y(1)
        bottom = top - 2 * self.mapper.percent_y(0)
        min_x = self.mapper.plot_x(poles[POLE_MIN])
        max_x = self.mapper.plot_x(poles[POLE_MAX])
        return {
            POLE_MIN: HitRegion(left=min_x - width, top=top, right=min_x, bottom=bottom),
            POLE_MAX: HitRegion(left=max_x, top=top, right=max_x + width, bottom=bottom),
        }

    def press(self, user_ticks: UserTickGroup, x: float, y: float) -> Optional[str]:
        for pole, region in self.hit_regions(user_ticks).items():
            if region.contains(x, y) and self.start(pole, user_ticks, x):
                return pole
        return None

    def start(self, pole: str, user_ticks: UserTickGroup, x: float = 0.0) -> bool:
        poles = self.poles(user_ticks)
        if poles is None or pole not in poles:
            return False
        other = POLE_MAX if pole == POLE_MIN else POLE_MIN
        self._gesture = PoleGesture(pole=pole, price=poles[pole], other_price=poles[other], origin_x=x)
        return True

    def move(self, x: float) -> None:
        gesture = self._gesture
        if gesture is None:
            return
        dx = x - gesture.origin_x
        if not dx:
            return
        new_price = self.mapper.plot_x_inverse(self.mapper.plot_x(gesture.price) + dx)
        price_text = format_price(new_price, self.price_digits)
        if gesture.pole == POLE_MIN:
            self.set_range_min(price_text)
            if gesture.other_price <= new_price:
                self.set_range_max(price_text)
        else:
            self.set_range_max(price_text)
            if gesture.other_price >= new_price:
                self.set_range_min(price_text)

    def release(self) -> None:
        self._gesture = None
