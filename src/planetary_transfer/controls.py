'''Unit-aware numeric controls of the calculator
A slider paired with a text entry, and the rules that pick the display unit
of each input from its magnitude'''

import logging
import numpy as np
from typing import Callable, Optional

from .config import config
from .quantities import Quantity, Mass, Distance, Velocity
from .utils import round_to

logger = logging.getLogger(__name__)


# ========== DISPLAY UNIT SELECTION ==========
def distance_unit(distance: Distance) -> str:
    """au above 7,500,000 km, km above 100,000 m, else m"""
    if distance.km > 7_500_000.0:
        return 'au'
    elif distance.m > 100_000.0:
        return 'km'
    return 'm'


def mass_unit(mass: Mass) -> str:
    """Solar above 100 jovian, jovian above 35 earth, earth above 8 lunar"""
    if mass.jovian > 100.0:
        return 'solar'
    elif mass.earth > 35.0:
        return 'jovian'
    elif mass.lunar > 8.0:
        return 'earth'
    return 'lunar'


def velocity_unit(velocity: Velocity) -> str:
    """km/s above 1000 m/s, m/s above 1000 mm/s, else mm/s (by magnitude)"""
    if abs(velocity.mps) > 1000.0:
        return 'kps'
    elif abs(velocity.mmps) > 1000.0:
        return 'mps'
    return 'mmps'


# ========== TEXT FORMATTING ==========
def format_number(value: float, decimals: Optional[int] = None) -> str:
    """Value rounded to ``decimals`` with thousands separators, no trailing zeros"""
    if decimals is None:
        decimals = config.DISPLAY_DECIMALS
    rounded = round_to(value, decimals)
    if rounded == 0:
        rounded = 0.0   # no "-0"
    text = f"{rounded:,.{decimals}f}"
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return text


def parse_number(text: str, fallback: float, suffix: str = '') -> float:
    """
    Parse user text as a float.

    Surrounding blanks, thousands separators and a trailing ``suffix`` are
    ignored. Unparseable text returns ``fallback``.
    """
    text = text.strip()
    if suffix.strip() and text.endswith(suffix.strip()):
        text = text[:-len(suffix.strip())]
    text = text.replace(',', '').strip()
    try:
        value = float(text)
    except ValueError:
        logger.debug("Could not parse %r, keeping %r", text, fallback)
        return fallback
    if not np.isfinite(value):
        return fallback
    return value


# ========== SLIDER WITH TEXT ==========
class SliderWithText:
    """
    A slider and a text entry editing the same number.

    The text entry shows the rounded value with a unit suffix while idle
    and the full-precision value while focused. Committing text parses it
    (falling back to the previous value) and clamps it into the range.

    Parameters
    ----------
    value : float
        Initial value
    low, high : float
        Range ends; ``high`` may be below ``low``
    suffix : str, optional
        Unit suffix appended to the idle text
    enabled : bool, optional
        Whether the slider accepts input (the text entry always does)
    log_scale : bool, optional
        Whether slider positions are logarithmic. Only honored when both
        range ends are positive.
    """

    def __init__(self, value: float, low: float, high: float, suffix: str = '',
                 enabled: bool = True, log_scale: bool = False):
        self._low = float(low)
        self._high = float(high)
        self.suffix = suffix
        self.enabled = enabled
        self.log_scale = log_scale and min(self._low, self._high) > 0
        self._value = self.clamp(value)
        self._focused = False
        self._text = self.display_text()

    @property
    def value(self) -> float:
        return self._value

    @property
    def range(self):
        """(low, high) as given"""
        return self._low, self._high

    @property
    def text(self) -> str:
        """Text currently shown in the entry"""
        return self._text

    def clamp(self, value: float) -> float:
        lower = min(self._low, self._high)
        upper = max(self._low, self._high)
        return float(np.clip(value, lower, upper))

    def display_text(self) -> str:
        return format_number(self._value) + self.suffix

    def edit_text(self) -> str:
        return f"{self._value:,}"

    def focus(self) -> str:
        """Enter text editing; the entry switches to the full value"""
        self._focused = True
        self._text = self.edit_text()
        return self._text

    def commit(self, text: str) -> float:
        """Leave text editing with ``text`` typed by the user"""
        value = parse_number(text, self._value, self.suffix)
        self._value = self.clamp(value)
        self._focused = False
        self._text = self.display_text()
        return self._value

    def drag(self, value: float) -> float:
        """Move the slider; editing is abandoned"""
        if not self.enabled:
            return self._value
        self._value = self.clamp(value)
        self._focused = False
        self._text = self.display_text()
        return self._value

    # slider position <-> value
    def to_position(self, value: float) -> float:
        return float(np.log10(value)) if self.log_scale else float(value)

    def from_position(self, position: float) -> float:
        return float(10**position) if self.log_scale else float(position)

    def position_range(self):
        lower = min(self._low, self._high)
        upper = max(self._low, self._high)
        return self.to_position(lower), self.to_position(upper)

    def __repr__(self):
        return (f"SliderWithText(value={self._value!r}, range=({self._low!r}, "
                f"{self._high!r}), suffix={self.suffix!r})")


class QuantityControl:
    """
    A SliderWithText editing a Quantity in its magnitude-chosen unit.

    Parameters
    ----------
    quantity : Quantity
        Current value
    low, high : Quantity
        Range ends, same type as ``quantity``
    unit_selector : callable
        Picks the display unit from a quantity, e.g. ``distance_unit``
    enabled, log_scale : bool, optional
        Passed to SliderWithText
    """

    def __init__(self, quantity: Quantity, low: Quantity, high: Quantity,
                 unit_selector: Callable[[Quantity], str],
                 enabled: bool = True, log_scale: bool = False):
        self.quantity = quantity
        self.unit = unit_selector(quantity)
        self.slider = SliderWithText(
            quantity.value_in(self.unit),
            low.value_in(self.unit),
            high.value_in(self.unit),
            suffix=' ' + quantity.symbol(self.unit),
            enabled=enabled,
            log_scale=log_scale,
        )

    def commit(self, text: str) -> Quantity:
        """Apply typed text and return the rebuilt quantity"""
        value = self.slider.commit(text)
        self.quantity = self.quantity.updated(self.unit, value)
        return self.quantity

    def drag(self, value: float) -> Quantity:
        """Apply a slider value (in the display unit) and return the rebuilt quantity"""
        value = self.slider.drag(value)
        self.quantity = self.quantity.updated(self.unit, value)
        return self.quantity

    @property
    def text(self) -> str:
        return self.slider.text
