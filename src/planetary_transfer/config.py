"""
Global Configuration for planetary_transfer
===========================================

This module provides package-wide configuration settings that users can modify
to control numerical tolerances, validation behavior, and default plotting options.

Examples
--------
View current configuration:

>>> import planetary_transfer
>>> print(planetary_transfer.config)

Modify settings:

>>> planetary_transfer.config.ANOMALY_DECIMALS = 6  # Finer acos guard
>>> planetary_transfer.config.DEFAULT_PLOT_POINTS = 2000  # Smoother curves

Reset to defaults:

>>> planetary_transfer.config.reset()

Temporarily modify settings:

>>> with planetary_transfer.temp_config(LAUNCH_VELOCITY_SPAN=0.3):
...     # Narrower delta-v range for this block only
...     transfer.max_velocity()

Notes
-----
These settings affect package-wide behavior. Modifying them will impact
all subsequent operations until changed again or reset.
"""

from dataclasses import dataclass
from contextlib import contextmanager
import math


@dataclass
class TransferConfig:
    """
    Global configuration for planetary_transfer package.

    Attributes
    ----------
    EQUALITY_RTOL : float
        Relative tolerance for floating-point equality comparisons of
        quantities and bodies.
        Default: 1e-12
    EQUALITY_ATOL : float
        Absolute tolerance for floating-point equality comparisons.
        Default: 1e-14
    HASH_DECIMALS : int
        Number of significant digits kept when computing hash values.
        Automatically computed from EQUALITY_RTOL
    SNAP_TO_CIRCULAR : float
        Transfer eccentricity below this magnitude is treated as a
        circular transfer (e=0).
        Default: 1e-8
    ANOMALY_DECIMALS : int
        Decimal places kept in the inverse-cosine argument of the true
        anomaly before clamping it into [-1, 1].
        Default: 5
    LAUNCH_VELOCITY_SPAN : float
        Fraction of the Hohmann departure velocity spanned by the allowed
        delta-v range of a non-Hohmann transfer.
        Default: 0.6
    STRICT_VALIDATION : bool
        If True, validation failures raise exceptions.
        If False, validation failures issue warnings.
        Default: True
    DISPLAY_DECIMALS : int
        Decimal places shown by the text entry of a slider control.
        Default: 4
    DEFAULT_PLOT_POINTS : int
        Default number of points per plotted orbit curve.
        Default: 512
    DEFAULT_ORBIT_COLOR : str
        Default color for the origin and target orbits.
        Default: 'white'
    DEFAULT_TRANSFER_COLOR : str
        Default color for the transfer arc.
        Default: '#ff7300'
    HIGHLIGHT_COLOR : str
        Color of an orbit whose control is being edited.
        Default: 'red'
    PROTRACTOR_COLOR : str
        Color of the phase angle protractor.
        Default: 'gray'
    DEFAULT_LINE_WIDTH : float
        Default width of orbit lines.
        Default: 1.0
    HIGHLIGHT_LINE_WIDTH : float
        Width of an orbit line whose control is hovered.
        Default: 2.0
    """

    # Numerical tolerance for equality comparisons
    EQUALITY_RTOL: float = 1e-12
    EQUALITY_ATOL: float = 1e-14

    # Numerical guards of the transfer solver
    SNAP_TO_CIRCULAR: float = 1e-8
    ANOMALY_DECIMALS: int = 5
    LAUNCH_VELOCITY_SPAN: float = 0.6

    # Validation behavior
    STRICT_VALIDATION: bool = True

    # Controls
    DISPLAY_DECIMALS: int = 4

    # Plotting defaults
    DEFAULT_PLOT_POINTS: int = 512
    DEFAULT_ORBIT_COLOR: str = 'white'
    DEFAULT_TRANSFER_COLOR: str = '#ff7300'
    HIGHLIGHT_COLOR: str = 'red'
    PROTRACTOR_COLOR: str = 'gray'
    DEFAULT_LINE_WIDTH: float = 1.0
    HIGHLIGHT_LINE_WIDTH: float = 2.0

    @property
    def HASH_DECIMALS(self) -> int:
        """
        Compute hash rounding digits from equality tolerance.

        Quantities span tens of orders of magnitude (kg of a star, mm/s),
        so hashes round to significant digits rather than decimal places.
        The rounding must be coarse enough that two values equal within
        EQUALITY_RTOL hash to the same value.

        Formula: HASH_DECIMALS = -floor(log10(RTOL)) - 2
        The -2 provides safety margin (2 orders of magnitude).

        Returns
        -------
        int
            Number of significant digits for hash rounding
        """
        magnitude = -math.floor(math.log10(self.EQUALITY_RTOL))
        return max(magnitude - 2, 1)  # At least 1 digit

    def reset(self):
        """
        Reset all configuration values to package defaults.

        Examples
        --------
        >>> import planetary_transfer
        >>> planetary_transfer.config.ANOMALY_DECIMALS = 8  # Modify
        >>> planetary_transfer.config.reset()  # Back to defaults
        >>> planetary_transfer.config.ANOMALY_DECIMALS
        5
        """
        defaults = TransferConfig()
        for key in self.__dataclass_fields__:
            setattr(self, key, getattr(defaults, key))

    def __repr__(self):
        """Return formatted string showing all configuration values."""
        lines = ["TransferConfig:"]
        lines.append("  Numerical Tolerances:")
        lines.append(f"    EQUALITY_RTOL = {self.EQUALITY_RTOL}")
        lines.append(f"    EQUALITY_ATOL = {self.EQUALITY_ATOL}")
        lines.append(f"    HASH_DECIMALS = {self.HASH_DECIMALS}")
        lines.append("  Transfer Solver:")
        lines.append(f"    SNAP_TO_CIRCULAR = {self.SNAP_TO_CIRCULAR}")
        lines.append(f"    ANOMALY_DECIMALS = {self.ANOMALY_DECIMALS}")
        lines.append(f"    LAUNCH_VELOCITY_SPAN = {self.LAUNCH_VELOCITY_SPAN}")
        lines.append("  Behavior:")
        lines.append(f"    STRICT_VALIDATION = {self.STRICT_VALIDATION}")
        lines.append(f"    DISPLAY_DECIMALS = {self.DISPLAY_DECIMALS}")
        lines.append("  Plotting:")
        lines.append(f"    DEFAULT_PLOT_POINTS = {self.DEFAULT_PLOT_POINTS}")
        lines.append(f"    DEFAULT_ORBIT_COLOR = '{self.DEFAULT_ORBIT_COLOR}'")
        lines.append(f"    DEFAULT_TRANSFER_COLOR = '{self.DEFAULT_TRANSFER_COLOR}'")
        lines.append(f"    HIGHLIGHT_COLOR = '{self.HIGHLIGHT_COLOR}'")
        lines.append(f"    PROTRACTOR_COLOR = '{self.PROTRACTOR_COLOR}'")
        lines.append(f"    DEFAULT_LINE_WIDTH = {self.DEFAULT_LINE_WIDTH}")
        lines.append(f"    HIGHLIGHT_LINE_WIDTH = {self.HIGHLIGHT_LINE_WIDTH}")
        return "\n".join(lines)


# Global configuration instance
config = TransferConfig()


@contextmanager
def temp_config(**kwargs):
    """
    Context manager for temporarily modifying configuration values.

    Configuration is automatically restored when the context exits,
    even if an exception occurs.

    Parameters
    ----------
    **kwargs
        Configuration attributes to temporarily modify.

    Examples
    --------
    >>> import planetary_transfer as pt
    >>> with pt.temp_config(LAUNCH_VELOCITY_SPAN=0.3, STRICT_VALIDATION=False):
    ...     transfer = pt.earth_mars_hohmann()
    ...     transfer.velocity_range()
    >>> # Original config restored here
    >>> pt.config.LAUNCH_VELOCITY_SPAN
    0.6

    Raises
    ------
    AttributeError
        If an invalid configuration attribute is specified.
    """
    old_values = {}
    for key, value in kwargs.items():
        if not hasattr(config, key):
            raise AttributeError(
                f"TransferConfig has no attribute '{key}'. "
                f"Valid attributes: {list(config.__dataclass_fields__.keys())}"
            )
        old_values[key] = getattr(config, key)
        setattr(config, key, value)

    try:
        yield config
    finally:
        for key, value in old_values.items():
            setattr(config, key, value)
