'''Two-body transfer between two circular orbits around a common parent
Transfer class definition'''

import logging
import numpy as np
import pandas as pd
from typing import Dict, Optional, Tuple, Union

from .config import config
from .bodies import Parent, Planet
from .quantities import Distance, Velocity, Duration
from .utils import round_to, normalize_angle

logger = logging.getLogger(__name__)


class IncompatibleParentsError(ValueError):
    """Origin and target planets do not orbit the same parent."""

    def __init__(self, origin: Planet, target: Planet):
        self.origin = origin
        self.target = target
        super().__init__(
            f"Origin and target must share a parent: "
            f"mu={origin.gravitational_parameter:.6g} m³/s² vs "
            f"mu={target.gravitational_parameter:.6g} m³/s²")


class Transfer:
    """
    Impulsive transfer from an origin planet to a target planet.

    The transfer starts with a single tangential burn on the origin's
    circular orbit. By default the burn is the Hohmann departure burn;
    ``set_delta_v`` selects any other burn, stored as an offset from the
    Hohmann baseline. Every orbital quantity (semi-major axis,
    eccentricity, anomalies, time of flight, phase) is recomputed on
    demand from the origin, the target and that offset.

    Sign conventions
    ----------------
    - True anomalies are measured from the departure point, increasing in
      the direction of motion. The departure anomaly is therefore 0.
    - Eccentricity is signed: positive when the departure point is the
      periapsis of the transfer conic (burn outward), negative when it is
      the apoapsis (burn inward). ``|e| < 1`` is an ellipse, ``|e| > 1`` a
      hyperbola, ``e == 0`` a circle.
    - The phase angle is positive when the target leads the origin.

    Parameters
    ----------
    origin : Planet
        Departure body
    target : Planet
        Arrival body, orbiting the same parent as ``origin``
    delta_v : Velocity, optional
        Departure burn. Defaults to the Hohmann burn.

    Raises
    ------
    IncompatibleParentsError
        If origin and target orbit parents with different gravitational
        parameters
    """

    # ========== CONSTRUCTION ==========
    def __init__(self, origin: Planet, target: Planet,
                 delta_v: Optional[Velocity] = None):
        if origin.parent != target.parent:
            raise IncompatibleParentsError(origin, target)

        self._origin = origin
        self._target = target
        self._parent = origin.parent
        self._add_delta_v = Velocity.from_mps(0.0)

        if delta_v is not None:
            self.set_delta_v(delta_v)

        logger.debug("Transfer %.6g m -> %.6g m around mu=%.6g m³/s²",
                     origin.sma.m, target.sma.m, self.gravitational_parameter)

    # ========== PROPERTY ACCESS ==========
    @property
    def origin(self) -> Planet:
        return self._origin

    @property
    def target(self) -> Planet:
        return self._target

    @property
    def parent(self) -> Parent:
        return self._parent

    @property
    def gravitational_parameter(self) -> float:
        """Gravitational parameter μ of the shared parent [m³/s²]"""
        return self._parent.gravitational_parameter

    @property
    def additional_delta_v(self) -> Velocity:
        """Departure burn in excess of the Hohmann burn"""
        return self._add_delta_v

    # ========== DEPARTURE BURN ==========
    def velocity_hohmann(self) -> Velocity:
        """Departure speed of the Hohmann transfer"""
        r1 = self._origin.sma.m
        r2 = self._target.sma.m
        return self._origin.orbital_velocity().scale(np.sqrt(2 * r2 / (r1 + r2)))

    def delta_v_hohmann(self) -> Velocity:
        """Departure burn of the Hohmann transfer (negative inward)"""
        return self.velocity_hohmann().subtract(self._origin.orbital_velocity())

    def set_delta_v(self, delta_v: Union[Velocity, float]):
        """
        Select the departure burn.

        Parameters
        ----------
        delta_v : Velocity or float
            Total departure burn; a float is read as m/s
        """
        if not isinstance(delta_v, Velocity):
            delta_v = Velocity.from_mps(delta_v)
        self._add_delta_v = delta_v.subtract(self.delta_v_hohmann())

    def delta_v(self) -> Velocity:
        """Departure burn actually applied"""
        return self.delta_v_hohmann().add(self._add_delta_v)

    def launch_velocity(self) -> Velocity:
        """Speed right after the departure burn"""
        return self.velocity_hohmann().add(self._add_delta_v)

    # ========== TRANSFER ORBIT ==========
    def sma(self) -> Distance:
        """
        Semi-major axis of the transfer orbit from the vis-viva equation.

        Negative for hyperbolic transfers.
        """
        r = self._origin.sma.m
        mu = self.gravitational_parameter
        v = self.launch_velocity().mps
        return Distance.from_meters(r * mu / (2 * mu - r * v**2))

    def eccentricity(self) -> float:
        """
        Signed eccentricity of the transfer orbit.

        Equal to ``1 - r_origin / sma``. Magnitudes below
        ``config.SNAP_TO_CIRCULAR`` are returned as exactly 0.
        """
        r = self._origin.sma.m
        v = self.launch_velocity().mps
        e = r * v**2 / self.gravitational_parameter - 1
        if abs(e) < config.SNAP_TO_CIRCULAR:
            return 0.0
        return float(e)

    def semi_latus_rectum(self) -> float:
        """Semi-latus rectum p = sma⋅(1 - e²) [m]"""
        r = self._origin.sma.m
        v = self.launch_velocity().mps
        return (r * v)**2 / self.gravitational_parameter

    def is_circular(self) -> bool:
        return self.eccentricity() == 0.0

    def is_hyperbolic(self) -> bool:
        return abs(self.eccentricity()) > 1

    # ========== ANOMALIES ==========
    def true_anomaly(self, radius: Distance) -> float:
        """
        True anomaly [rad] at which the transfer orbit reaches ``radius``.

        The acos argument is rounded to ``config.ANOMALY_DECIMALS`` and
        clamped into [-1, 1]; a radius the orbit never reaches maps to the
        nearest apsis. A circular transfer returns 0.
        """
        e = self.eccentricity()
        if e == 0.0:
            return 0.0
        cos_nu = (self.semi_latus_rectum() / radius.m - 1) / e
        cos_nu = round_to(cos_nu, config.ANOMALY_DECIMALS)
        return float(np.arccos(np.clip(cos_nu, -1.0, 1.0)))

    def eccentric_anomaly_cos(self, true_anomaly: float) -> float:
        """
        cos(E) of the eccentric anomaly, or cosh(H) of the hyperbolic
        anomaly for hyperbolic transfers
        """
        e = self.eccentricity()
        return (e + np.cos(true_anomaly)) / (1 + e * np.cos(true_anomaly))

    def mean_anomaly(self, eccentric_anomaly_cos: float) -> float:
        """
        Mean anomaly from Kepler's equation.

        Elliptic: M = E - e⋅sin(E). Hyperbolic: M = e⋅sinh(H) - H.
        """
        e = self.eccentricity()
        if abs(e) < 1:
            E = np.arccos(np.clip(eccentric_anomaly_cos, -1.0, 1.0))
            return float(E - e * np.sin(E))
        H = np.arccosh(max(eccentric_anomaly_cos, 1.0))
        return float(e * np.sinh(H) - H)

    def origin_true_anomaly_departure(self) -> float:
        """Anomaly of the departure point (0 by construction)"""
        return self.true_anomaly(self._origin.sma)

    def target_true_anomaly_arrival(self) -> float:
        """
        Anomaly at which the transfer reaches the target orbit.

        A circular transfer arrives half a revolution after departure.
        """
        if self.is_circular():
            return float(np.pi)
        return self.true_anomaly(self._target.sma)

    def target_true_anomaly_departure(self) -> float:
        """Angular position of the target at departure, in (-pi, pi]"""
        swept = 2 * np.pi * self.time_of_flight().seconds / self._target.period()
        return normalize_angle(self.target_true_anomaly_arrival() - swept)

    def origin_true_anomaly_arrival(self) -> float:
        """Angular position of the origin at arrival, in (-pi, pi]"""
        swept = 2 * np.pi * self.time_of_flight().seconds / self._origin.period()
        return normalize_angle(self.origin_true_anomaly_departure() + swept)

    def phase(self) -> float:
        """
        Phase angle [rad] in (-pi, pi].

        Angle by which the target must lead the origin at departure so that
        both meet when the transfer completes.
        """
        return normalize_angle(self.target_true_anomaly_departure()
                               - self.origin_true_anomaly_departure())

    # ========== TIME OF FLIGHT ==========
    def time_since_departure(self, true_anomaly: float) -> float:
        """Flight time [s] from departure to ``true_anomaly`` along the arc"""
        mean_departure = self.mean_anomaly(
            self.eccentric_anomaly_cos(self.origin_true_anomaly_departure()))
        mean_anomaly = self.mean_anomaly(self.eccentric_anomaly_cos(true_anomaly))
        scale = np.sqrt(abs(self.sma().m)**3 / self.gravitational_parameter)
        return float((mean_anomaly - mean_departure) * scale)

    def time_of_flight(self) -> Duration:
        """Flight time from departure to arrival on the target orbit"""
        e = self.eccentricity()
        if e == 0.0:
            branch = 'circular'
        elif abs(e) > 1:
            branch = 'hyperbolic'
        else:
            branch = 'elliptic'
        logger.debug("Time of flight on the %s branch (e=%.6g)", branch, e)
        return Duration.from_seconds(
            self.time_since_departure(self.target_true_anomaly_arrival()))

    # ========== ALLOWED BURN RANGE ==========
    def min_velocity(self) -> Velocity:
        """Lower end of the interactive burn range (the Hohmann burn)"""
        return self.delta_v_hohmann()

    def max_velocity(self) -> Velocity:
        """
        Upper end of the interactive burn range.

        The Hohmann burn plus (outward) or minus (inward) a fraction
        ``config.LAUNCH_VELOCITY_SPAN`` of the Hohmann departure speed.
        """
        span = self.velocity_hohmann().scale(config.LAUNCH_VELOCITY_SPAN)
        if self._origin.sma.m < self._target.sma.m:
            return self.delta_v_hohmann().add(span)
        return self.delta_v_hohmann().subtract(span)

    def velocity_range(self) -> Tuple[Velocity, Velocity]:
        """(min_velocity, max_velocity); max is below min for inward transfers"""
        return self.min_velocity(), self.max_velocity()

    def clamp_delta_v(self, delta_v: Velocity) -> Velocity:
        """Clamp a burn into the allowed interactive range"""
        low, high = sorted(v.mps for v in self.velocity_range())
        clamped = float(np.clip(delta_v.mps, low, high))
        if clamped != delta_v.mps:
            logger.debug("Burn %.6g m/s clamped to %.6g m/s", delta_v.mps, clamped)
            return Velocity.from_mps(clamped)
        return delta_v

    # ========== EXPORT ==========
    def summary(self) -> Dict[str, float]:
        """Derived quantities of the transfer, in SI units and radians"""
        return {
            'sma': self.sma().m,
            'eccentricity': self.eccentricity(),
            'delta_v': self.delta_v().mps,
            'launch_velocity': self.launch_velocity().mps,
            'time_of_flight': self.time_of_flight().seconds,
            'phase': self.phase(),
            'origin_true_anomaly_departure': self.origin_true_anomaly_departure(),
            'origin_true_anomaly_arrival': self.origin_true_anomaly_arrival(),
            'target_true_anomaly_departure': self.target_true_anomaly_departure(),
            'target_true_anomaly_arrival': self.target_true_anomaly_arrival(),
        }

    def to_dataframe(self, n_points: Optional[int] = None) -> pd.DataFrame:
        """
        Sample the transfer arc from departure to arrival.

        Parameters:
            n_points: Number of samples (default: config.DEFAULT_PLOT_POINTS)

        Returns:
            DataFrame with columns true_anomaly [rad], radius [m], x [m],
            y [m] and time [s since departure]
        """
        if n_points is None:
            n_points = config.DEFAULT_PLOT_POINTS
        if n_points < 2:
            raise ValueError("n_points must be at least 2")

        nu = np.linspace(self.origin_true_anomaly_departure(),
                         self.target_true_anomaly_arrival(), n_points)
        radius = self.semi_latus_rectum() / (1 + self.eccentricity() * np.cos(nu))
        time = np.array([self.time_since_departure(angle) for angle in nu])

        return pd.DataFrame({
            'true_anomaly': nu,
            'radius': radius,
            'x': radius * np.cos(nu),
            'y': radius * np.sin(nu),
            'time': time,
        })

    # ========== SPECIAL METHODS ==========
    def __repr__(self):
        return (f"Transfer(origin={self._origin!r}, target={self._target!r}, "
                f"delta_v={self.delta_v().mps:.6g} m/s)")

    def __str__(self):
        flight = self.time_of_flight().smallest_unit().round_to(2)
        return (f"Transfer:\n"
                f"  origin sma     = {self._origin.sma.au:12.6f} au\n"
                f"  target sma     = {self._target.sma.au:12.6f} au\n"
                f"  a              = {self.sma().au:12.6f} au\n"
                f"  e              = {self.eccentricity():12.6f}\n"
                f"  Δv             = {self.delta_v().kps:12.6f} km/s\n"
                f"  time of flight = {flight}\n"
                f"  phase angle    = {np.degrees(self.phase()):12.4f}°")
