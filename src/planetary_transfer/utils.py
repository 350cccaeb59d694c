"""
Utility functions for the planetary_transfer package.
"""

import warnings
from typing import Type

import numpy as np

from .config import config


def validation_error(message: str, error_class: Type[Exception] = ValueError):
    """
    Raise error or warn based on config.STRICT_VALIDATION.

    This function provides consistent validation behavior across the package.
    When STRICT_VALIDATION is True (default), raises the specified exception.
    When False, issues a UserWarning instead.

    Parameters
    ----------
    message : str
        Validation error message
    error_class : Type[Exception], optional
        Exception class to raise if STRICT_VALIDATION is True.
        Default: ValueError

    Raises
    ------
    Exception (of type error_class)
        If config.STRICT_VALIDATION is True

    Warns
    -----
    UserWarning
        If config.STRICT_VALIDATION is False

    Examples
    --------
    >>> from planetary_transfer.utils import validation_error
    >>> from planetary_transfer import config
    >>> config.STRICT_VALIDATION = True
    >>> validation_error("Invalid value")  # Raises ValueError

    >>> config.STRICT_VALIDATION = False
    >>> validation_error("Invalid value")  # Issues warning
    """
    if config.STRICT_VALIDATION:
        raise error_class(message)
    else:
        warnings.warn(message, UserWarning, stacklevel=2)


def round_to(value: float, decimals: int) -> float:
    """Round half away from zero to a fixed number of decimal places."""
    scale = 10.0 ** decimals
    return float(np.sign(value) * np.floor(np.abs(value) * scale + 0.5) / scale)


def normalize_angle(angle: float) -> float:
    """Wrap an angle [rad] into the interval (-pi, pi]."""
    return float(np.pi - np.mod(np.pi - angle, 2 * np.pi))
