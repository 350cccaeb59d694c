'''Physical quantities with simultaneous representations in several units
Mass, Distance, Velocity and Duration share one implementation: a canonical
value plus a table of conversion factors'''

import numpy as np
from dataclasses import dataclass
from typing import Dict, Tuple

from .config import config
from .utils import validation_error, round_to

# ========== CONVERSION CONSTANTS ==========
GRAVITATIONAL_CONSTANT = 6.67430e-11    # m³/(kg⋅s²)

LUNAR_MASS = 7.34767309e22              # kg
EARTH_MASS = 5.9722e24                  # kg
JOVIAN_MASS = 1.89813e27                # kg
SOLAR_MASS = 1.98847e30                 # kg

KM_METERS = 1e3
AU_METERS = 149598023e3                 # 149,598,023 km
MM_METERS = 1e-3

SECS_PER_MINUTE = 60.0
SECS_PER_HOUR = 3600.0
SECS_PER_DAY = 86400.0
SECS_PER_MONTH = 2629746.0              # 30.436875 days
SECS_PER_YEAR = 31556952.0              # 365.2425 days


class Quantity:
    """
    Scalar physical quantity readable in any of its declared units.

    A quantity stores one canonical value (the unit whose factor is 1) and
    derives every other unit from it through a fixed conversion factor.
    The value in the unit the quantity was built from is kept exactly as
    given, so a control editing that unit round-trips without drift.

    Quantities are immutable. To change one, build a new quantity from the
    edited unit with ``updated(unit, value)`` or a ``from_<unit>``
    constructor; all unit representations of the result are consistent.

    Subclasses declare ``_UNITS`` (unit name -> factor to canonical unit,
    ordered smallest to largest), ``_SYMBOLS`` (unit name -> display
    symbol) and ``_CANONICAL``.
    """
    _UNITS: Dict[str, float] = {}
    _SYMBOLS: Dict[str, str] = {}
    _CANONICAL: str = ''

    # ========== CONSTRUCTION ==========
    def __init__(self, value: float, unit: str = None):
        if unit is None:
            unit = self._CANONICAL
        factor = self._factor(unit)
        value = float(value)
        if not np.isfinite(value):
            validation_error(
                f"{type(self).__name__} must be finite, got {value} {unit}")

        object.__setattr__(self, '_unit', unit)
        object.__setattr__(self, '_given', value)
        object.__setattr__(self, '_value', value * factor)

    @classmethod
    def from_unit(cls, unit: str, value: float):
        """Build a quantity from a value expressed in ``unit``."""
        return cls(value, unit)

    def updated(self, unit: str, value: float):
        """
        Rebuild the whole quantity from a new value of one of its units.

        This is the step a unit-aware control performs after the user
        edited ``unit``: every other representation is recomputed from it.

        Returns
        -------
        Quantity
            New quantity of the same type
        """
        return type(self)(value, unit)

    # ========== PROPERTY ACCESS ==========
    @property
    def value(self) -> float:
        """Value in the canonical unit"""
        return self._value

    @property
    def unit(self) -> str:
        """Unit the quantity was built from"""
        return self._unit

    def value_in(self, unit: str) -> float:
        """Value expressed in ``unit``"""
        factor = self._factor(unit)
        if unit == self._unit:
            return self._given
        return self._value / factor

    def as_dict(self) -> Dict[str, float]:
        """All unit representations, keyed by unit name"""
        return {unit: self.value_in(unit) for unit in self._UNITS}

    @classmethod
    def units(cls) -> Tuple[str, ...]:
        """Unit names, smallest to largest"""
        return tuple(cls._UNITS)

    @classmethod
    def symbol(cls, unit: str) -> str:
        """Display symbol of ``unit``"""
        cls._factor(unit)
        return cls._SYMBOLS.get(unit, unit)

    # ========== ARITHMETIC ==========
    def add(self, other):
        """Sum of two quantities of the same type"""
        self._check_same_type(other)
        return type(self)(self._value + other._value)

    def subtract(self, other):
        """Difference of two quantities of the same type"""
        self._check_same_type(other)
        return type(self)(self._value - other._value)

    def scale(self, factor: float):
        """Quantity multiplied by a dimensionless factor"""
        return type(self)(self._value * float(factor))

    def divide(self, divisor: float):
        """Quantity divided by a dimensionless divisor"""
        return type(self)(self._value / float(divisor))

    # ========== SPECIAL METHODS ==========
    def __getattr__(self, name):
        # unit names read as attributes, e.g. mass.solar or distance.km
        if not name.startswith('_') and name in type(self)._UNITS:
            return self.value_in(name)
        raise AttributeError(
            f"'{type(self).__name__}' object has no attribute '{name}'")

    def __setattr__(self, name, value):
        raise AttributeError(
            f"{type(self).__name__} is immutable, build a new one with "
            f".updated() or a from_<unit>() constructor")

    def __float__(self):
        return self._value

    def __repr__(self):
        return f"{type(self).__name__}({self._given!r}, {self._unit!r})"

    def __str__(self):
        return f"{self._given} {self.symbol(self._unit)}"

    def __eq__(self, other):
        if not isinstance(other, Quantity):
            return NotImplemented
        if type(self) is not type(other):
            return False
        return bool(np.isclose(self._value, other._value,
                               rtol=config.EQUALITY_RTOL,
                               atol=config.EQUALITY_ATOL))

    def __hash__(self):
        # Round to significant digits so that equal values hash alike
        digits = config.HASH_DECIMALS
        return hash((type(self).__name__, float(f"{self._value:.{digits}e}")))

    # ========== HELPERS ==========
    @classmethod
    def _factor(cls, unit: str) -> float:
        try:
            return cls._UNITS[unit]
        except KeyError:
            raise ValueError(
                f"Unknown {cls.__name__} unit '{unit}'. "
                f"Use: {list(cls._UNITS)}") from None

    def _check_same_type(self, other):
        if type(other) is not type(self):
            raise TypeError(
                f"Cannot combine {type(self).__name__} with "
                f"{type(other).__name__}")


class Mass(Quantity):
    """Mass, canonical unit kilograms"""
    _UNITS = {
        'kg': 1.0,
        'lunar': LUNAR_MASS,
        'earth': EARTH_MASS,
        'jovian': JOVIAN_MASS,
        'solar': SOLAR_MASS,
    }
    _SYMBOLS = {'kg': 'kg', 'lunar': 'Ml', 'earth': 'Me',
                'jovian': 'Mj', 'solar': 'M☉'}
    _CANONICAL = 'kg'

    @classmethod
    def from_kg(cls, value):
        return cls(value, 'kg')

    @classmethod
    def from_lunar(cls, value):
        return cls(value, 'lunar')

    @classmethod
    def from_earth(cls, value):
        return cls(value, 'earth')

    @classmethod
    def from_jovian(cls, value):
        return cls(value, 'jovian')

    @classmethod
    def from_solar(cls, value):
        return cls(value, 'solar')

    @property
    def gravitational_parameter(self) -> float:
        """Gravitational parameter μ = G⋅m [m³/s²]"""
        return self._value * GRAVITATIONAL_CONSTANT


class Distance(Quantity):
    """Distance, canonical unit meters"""
    _UNITS = {
        'm': 1.0,
        'km': KM_METERS,
        'au': AU_METERS,
    }
    _SYMBOLS = {'m': 'm', 'km': 'km', 'au': 'au'}
    _CANONICAL = 'm'

    @classmethod
    def from_meters(cls, value):
        return cls(value, 'm')

    @classmethod
    def from_km(cls, value):
        return cls(value, 'km')

    @classmethod
    def from_au(cls, value):
        return cls(value, 'au')


class Velocity(Quantity):
    """Velocity, canonical unit meters per second"""
    _UNITS = {
        'mmps': MM_METERS,
        'mps': 1.0,
        'kps': KM_METERS,
    }
    _SYMBOLS = {'mmps': 'mm/s', 'mps': 'm/s', 'kps': 'km/s'}
    _CANONICAL = 'mps'

    @classmethod
    def from_mmps(cls, value):
        return cls(value, 'mmps')

    @classmethod
    def from_mps(cls, value):
        return cls(value, 'mps')

    @classmethod
    def from_kps(cls, value):
        return cls(value, 'kps')


@dataclass(frozen=True)
class TimeValue:
    """A duration expressed in a single named unit, for display."""
    value: float
    unit: str

    def round_to(self, decimals: int) -> 'TimeValue':
        return TimeValue(round_to(self.value, decimals), self.unit)

    def __str__(self):
        return f"{self.value} {self.unit}"


class Duration(Quantity):
    """
    Duration, canonical unit seconds.

    Months are a twelfth of a 365.2425-day year.
    """
    _UNITS = {
        'seconds': 1.0,
        'minutes': SECS_PER_MINUTE,
        'hours': SECS_PER_HOUR,
        'days': SECS_PER_DAY,
        'months': SECS_PER_MONTH,
        'years': SECS_PER_YEAR,
    }
    _CANONICAL = 'seconds'

    @classmethod
    def from_seconds(cls, value):
        return cls(value, 'seconds')

    @classmethod
    def from_minutes(cls, value):
        return cls(value, 'minutes')

    @classmethod
    def from_hours(cls, value):
        return cls(value, 'hours')

    @classmethod
    def from_days(cls, value):
        return cls(value, 'days')

    @classmethod
    def from_months(cls, value):
        return cls(value, 'months')

    @classmethod
    def from_years(cls, value):
        return cls(value, 'years')

    def in_unit(self, unit: str) -> TimeValue:
        """The duration as a TimeValue in ``unit``"""
        return TimeValue(self.value_in(unit), unit)

    def smallest_unit(self) -> TimeValue:
        """
        Largest unit in which the duration is at least 1.

        Units are scanned from years down to minutes; seconds are returned
        when no larger unit reaches 1.
        """
        for unit in reversed(self.units()):
            if self.value_in(unit) >= 1.0:
                return self.in_unit(unit)
        return self.in_unit('seconds')
