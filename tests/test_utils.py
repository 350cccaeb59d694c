"""
Test suite for utility functions.

Tests cover:
- validation_error strict and lenient modes
- round_to half-away-from-zero rounding
- normalize_angle wrapping into (-pi, pi]
"""

import pytest
import numpy as np
from planetary_transfer import temp_config
from planetary_transfer.utils import validation_error, round_to, normalize_angle


class TestValidationError:
    """Test validation_error behavior."""

    def test_strict_raises(self):
        """Strict mode raises the requested error class."""
        with pytest.raises(ValueError, match="bad"):
            validation_error("bad")
        with pytest.raises(RuntimeError):
            validation_error("bad", RuntimeError)

    def test_lenient_warns(self):
        """Lenient mode warns instead of raising."""
        with temp_config(STRICT_VALIDATION=False):
            with pytest.warns(UserWarning, match="bad"):
                validation_error("bad")


class TestRoundTo:
    """Test round_to."""

    @pytest.mark.parametrize("value, decimals, expected", [
        (1.234567, 5, 1.23457),
        (1.0000000001, 5, 1.0),
        (-1.0000000001, 5, -1.0),
        (2.5, 0, 3.0),
        (-1.5, 0, -2.0),
        (8.50473, 2, 8.5),
    ])
    def test_values(self, value, decimals, expected):
        """Values round half away from zero."""
        assert round_to(value, decimals) == pytest.approx(expected, abs=1e-12)


class TestNormalizeAngle:
    """Test normalize_angle."""

    @pytest.mark.parametrize("angle, expected", [
        (0.0, 0.0),
        (np.pi, np.pi),
        (-np.pi, np.pi),
        (1.5 * np.pi, -0.5 * np.pi),
        (2 * np.pi + 0.1, 0.1),
        (-0.1, -0.1),
        (-4 * np.pi - 0.3, -0.3),
    ])
    def test_values(self, angle, expected):
        """Angles wrap into (-pi, pi]."""
        assert normalize_angle(angle) == pytest.approx(expected, abs=1e-12)

    @pytest.mark.parametrize("angle", np.linspace(-20, 20, 41))
    def test_range(self, angle):
        """Result always lies in (-pi, pi]."""
        wrapped = normalize_angle(angle)
        assert -np.pi < wrapped <= np.pi
