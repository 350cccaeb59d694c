'''Gravitating bodies of a planetary transfer
Parent (central mass) and Planet (body on a circular orbit around it)'''

import numpy as np
from typing import Optional

from .config import config
from .quantities import Mass, Distance, Velocity, Duration


class Parent:
    """
    Central body whose gravity both orbiting bodies share.

    Parameters
    ----------
    mass : Mass
        Mass of the central body
    name : str, optional
        Body identifier
    """

    def __init__(self, mass: Mass, name: Optional[str] = None):
        if not isinstance(mass, Mass):
            raise TypeError(f"Parent mass must be a Mass, got {type(mass).__name__}")
        if mass.kg <= 0:
            raise ValueError(f"Parent mass must be positive, got {mass.kg} kg")

        # Store as immutable
        self._mass = mass
        self._name = name

    @property
    def mass(self) -> Mass:
        """Mass of the central body"""
        return self._mass

    @property
    def gravitational_parameter(self) -> float:
        """Gravitational parameter μ [m³/s²]"""
        return self._mass.gravitational_parameter

    @property
    def name(self) -> Optional[str]:
        """Body identifier"""
        return self._name

    def __repr__(self) -> str:
        name_str = f"'{self.name}'" if self.name else "unnamed"
        return (f"Parent({name_str}, mass={self.mass.kg:.6g} kg, "
                f"mu={self.gravitational_parameter:.6g} m³/s²)")

    def __eq__(self, other) -> bool:
        if not isinstance(other, Parent):
            return NotImplemented
        return bool(np.isclose(self.gravitational_parameter,
                               other.gravitational_parameter,
                               rtol=config.EQUALITY_RTOL,
                               atol=config.EQUALITY_ATOL))

    def __hash__(self) -> int:
        return hash(self._mass)


class Planet:
    """
    Body on a circular orbit around a Parent.

    Parameters
    ----------
    sma : Distance
        Orbital radius (semi-major axis of the circular orbit)
    parent : Parent
        Central body
    name : str, optional
        Body identifier
    """

    def __init__(self, sma: Distance, parent: Parent, name: Optional[str] = None):
        if not isinstance(sma, Distance):
            raise TypeError(f"Planet sma must be a Distance, got {type(sma).__name__}")
        if not isinstance(parent, Parent):
            raise TypeError(f"Planet parent must be a Parent, got {type(parent).__name__}")
        if sma.m <= 0:
            raise ValueError(f"Orbital radius must be positive, got {sma.m} m")

        self._sma = sma
        self._parent = parent
        self._name = name

    @property
    def sma(self) -> Distance:
        """Orbital radius"""
        return self._sma

    @property
    def parent(self) -> Parent:
        """Central body"""
        return self._parent

    @property
    def gravitational_parameter(self) -> float:
        """Gravitational parameter of the central body [m³/s²]"""
        return self._parent.gravitational_parameter

    @property
    def name(self) -> Optional[str]:
        """Body identifier"""
        return self._name

    def period(self) -> float:
        """
        Orbital period from Kepler's third law

        Returns period in seconds
        """
        return 2 * np.pi * np.sqrt(self._sma.m**3 / self.gravitational_parameter)

    def period_duration(self) -> Duration:
        """Orbital period as a Duration"""
        return Duration.from_seconds(self.period())

    def orbital_velocity(self) -> Velocity:
        """Circular orbital velocity √(μ/r)"""
        return Velocity.from_mps(np.sqrt(self.gravitational_parameter / self._sma.m))

    def __repr__(self) -> str:
        name_str = f"'{self.name}'" if self.name else "unnamed"
        return f"Planet({name_str}, sma={self.sma.au:.6g} au, parent={self.parent!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Planet):
            return NotImplemented
        return self.sma == other.sma and self.parent == other.parent

    def __hash__(self) -> int:
        return hash((self._sma, self._parent))
