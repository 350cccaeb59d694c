"""
Test suite for the Transfer solver.

Tests cover:
- Construction and parent compatibility
- Hohmann departure burn
- Transfer orbit shape (semi-major axis, signed eccentricity)
- Anomalies, time of flight and phase angle
- Circular, inward and hyperbolic transfers
- Allowed burn range and clamping
- Tabular export
"""

import logging

import pytest
import numpy as np
import pandas as pd
from planetary_transfer import (
    Mass, Distance, Velocity, Parent, Planet, Transfer,
    IncompatibleParentsError, temp_config,
    earth_mars_hohmann, mars_earth_hohmann, default_transfer,
)


def elliptic_time(transfer, nu):
    """Time from periapsis via the half-angle form of Kepler's equation."""
    e = transfer.eccentricity()
    a = transfer.sma().m
    E = 2 * np.arctan(np.sqrt((1 - e) / (1 + e)) * np.tan(nu / 2))
    return (E - e * np.sin(E)) * np.sqrt(a**3 / transfer.gravitational_parameter)


def hyperbolic_time(transfer, nu):
    """Time from periapsis on a hyperbola via the half-angle form."""
    e = transfer.eccentricity()
    a = transfer.sma().m
    H = 2 * np.arctanh(np.sqrt((e - 1) / (e + 1)) * np.tan(nu / 2))
    return (e * np.sinh(H) - H) * np.sqrt(-a**3 / transfer.gravitational_parameter)


class TestConstruction:
    """Test Transfer construction."""

    def test_planets_stored(self, earth, mars):
        """Origin, target and parent are exposed."""
        transfer = Transfer(earth, mars)
        assert transfer.origin is earth
        assert transfer.target is mars
        assert transfer.parent == earth.parent

    def test_defaults_to_hohmann(self, earth, mars):
        """No extra burn unless one is selected."""
        transfer = Transfer(earth, mars)
        assert transfer.additional_delta_v.mps == 0.0
        assert transfer.delta_v() == transfer.delta_v_hohmann()

    def test_delta_v_argument(self, earth, mars):
        """The constructor burn equals a later set_delta_v."""
        a = Transfer(earth, mars, delta_v=Velocity.from_kps(4.0))
        b = Transfer(earth, mars)
        b.set_delta_v(Velocity.from_kps(4.0))
        assert a.delta_v().mps == pytest.approx(b.delta_v().mps)
        assert a.delta_v().mps == pytest.approx(4000.0)

    def test_incompatible_parents(self, earth):
        """Planets around different parents cannot be joined."""
        other = Planet(Distance.from_au(1.5), Parent(Mass.from_solar(2.0)))
        with pytest.raises(IncompatibleParentsError) as excinfo:
            Transfer(earth, other)
        assert excinfo.value.origin is earth
        assert excinfo.value.target is other

    def test_incompatible_parents_is_value_error(self, earth):
        """The error is also a ValueError."""
        other = Planet(Distance.from_au(1.5), Parent(Mass.from_earth(1.0)))
        with pytest.raises(ValueError, match="share a parent"):
            Transfer(earth, other)

    def test_equal_parents_accepted(self, earth):
        """Separately built parents with the same mass are compatible."""
        target = Planet(Distance.from_au(2.0), Parent(Mass.from_solar(1.0)))
        Transfer(earth, target)

    def test_repr(self):
        """repr names both planets and the burn."""
        text = repr(earth_mars_hohmann())
        assert "Earth" in text and "Mars" in text
        assert "m/s" in text


class TestHohmann:
    """Test the Hohmann departure burn."""

    def test_same_orbit_needs_no_burn(self, earth):
        """Hohmann velocity equals the circular velocity on the same orbit."""
        transfer = Transfer(earth, earth)
        assert transfer.velocity_hohmann().mps == pytest.approx(
            earth.orbital_velocity().mps, rel=1e-15)
        assert transfer.delta_v_hohmann().mps == pytest.approx(0.0, abs=1e-9)

    def test_earth_mars_burn(self, earth, mars):
        """Earth to Mars needs about 2.94 km/s."""
        transfer = Transfer(earth, mars)
        assert transfer.delta_v_hohmann().mps == pytest.approx(2945.0, rel=1e-3)
        assert transfer.velocity_hohmann().mps == pytest.approx(32730.0, rel=1e-3)

    @pytest.mark.parametrize("target_au, sign", [(1.52366, 1), (5.0, 1), (0.72, -1), (0.39, -1)])
    def test_burn_sign(self, earth, target_au, sign):
        """Outward transfers burn prograde, inward transfers retrograde."""
        target = Planet(Distance.from_au(target_au), earth.parent)
        assert np.sign(Transfer(earth, target).delta_v_hohmann().mps) == sign

    def test_launch_velocity(self, earth, mars):
        """Launch speed is the circular speed plus the burn."""
        transfer = Transfer(earth, mars)
        assert transfer.launch_velocity().mps == pytest.approx(
            earth.orbital_velocity().mps + transfer.delta_v().mps)

    def test_set_delta_v_float_is_mps(self, earth, mars):
        """A bare float burn is read as m/s."""
        transfer = Transfer(earth, mars)
        transfer.set_delta_v(3500.0)
        assert transfer.delta_v().mps == pytest.approx(3500.0)
        assert transfer.additional_delta_v.mps == pytest.approx(
            3500.0 - transfer.delta_v_hohmann().mps)


class TestEarthMars:
    """Test the Earth to Mars Hohmann transfer."""

    def test_semi_major_axis(self, earth, mars):
        """The Hohmann ellipse spans both radii."""
        transfer = Transfer(earth, mars)
        assert transfer.sma().m == pytest.approx((earth.sma.m + mars.sma.m) / 2, rel=1e-9)
        assert transfer.sma().au == pytest.approx(1.26183, rel=1e-6)

    def test_eccentricity(self, earth, mars):
        """e = 1 - r_origin / a."""
        transfer = Transfer(earth, mars)
        assert transfer.eccentricity() == pytest.approx(0.2075, abs=1e-3)
        assert transfer.eccentricity() == pytest.approx(
            1 - earth.sma.m / transfer.sma().m, rel=1e-9)
        assert not transfer.is_circular()
        assert not transfer.is_hyperbolic()

    def test_semi_latus_rectum(self, earth, mars):
        """p = a (1 - e^2)."""
        transfer = Transfer(earth, mars)
        e = transfer.eccentricity()
        assert transfer.semi_latus_rectum() == pytest.approx(
            transfer.sma().m * (1 - e**2), rel=1e-9)

    def test_anomalies(self, earth, mars):
        """Departure at periapsis, arrival at apoapsis."""
        transfer = Transfer(earth, mars)
        assert transfer.origin_true_anomaly_departure() == pytest.approx(0.0, abs=1e-12)
        assert transfer.target_true_anomaly_arrival() == pytest.approx(np.pi)

    def test_time_of_flight(self, earth, mars):
        """About 259 days, half the transfer ellipse's period."""
        transfer = Transfer(earth, mars)
        flight = transfer.time_of_flight()
        assert flight.seconds == pytest.approx(2.2366e7, rel=2e-3)
        assert flight.days == pytest.approx(258.9, abs=0.5)
        half_period = np.pi * np.sqrt(transfer.sma().m**3 / transfer.gravitational_parameter)
        assert flight.seconds == pytest.approx(half_period, rel=1e-9)

    def test_display_unit(self):
        """Shown in months."""
        flight = earth_mars_hohmann().time_of_flight().smallest_unit().round_to(2)
        assert flight.unit == 'months'
        assert flight.value == pytest.approx(8.5, abs=0.02)

    def test_phase(self, earth, mars):
        """Mars leads Earth by about 44 degrees."""
        transfer = Transfer(earth, mars)
        assert transfer.phase() == pytest.approx(0.774, abs=0.01)
        assert np.degrees(transfer.phase()) == pytest.approx(44.3, abs=0.5)

    def test_phase_from_target_motion(self, earth, mars):
        """Phase is pi minus the target's sweep during the flight."""
        transfer = Transfer(earth, mars)
        swept = 2 * np.pi * transfer.time_of_flight().seconds / mars.period()
        assert transfer.phase() == pytest.approx(np.pi - swept, abs=1e-12)

    def test_origin_at_arrival(self, earth, mars):
        """Earth has moved about 255 degrees, i.e. -105 degrees wrapped."""
        transfer = Transfer(earth, mars)
        swept = 2 * np.pi * transfer.time_of_flight().seconds / earth.period()
        assert transfer.origin_true_anomaly_arrival() == pytest.approx(swept - 2 * np.pi)
        assert transfer.origin_true_anomaly_arrival() == pytest.approx(-1.830, abs=0.01)

    def test_factory(self, earth, mars):
        """earth_mars_hohmann matches a hand-built transfer."""
        assert earth_mars_hohmann().time_of_flight() == Transfer(earth, mars).time_of_flight()

    def test_default_transfer(self):
        """The start-up transfer is Earth to Mars."""
        assert default_transfer().phase() == pytest.approx(earth_mars_hohmann().phase())


class TestInward:
    """Test inward transfers."""

    def test_negative_eccentricity(self):
        """Departure at apoapsis gives a negative eccentricity."""
        transfer = mars_earth_hohmann()
        assert transfer.eccentricity() == pytest.approx(-0.2075, abs=1e-3)
        assert transfer.eccentricity() == pytest.approx(
            -earth_mars_hohmann().eccentricity(), rel=1e-9)

    def test_same_ellipse_as_outward(self):
        """Same semi-major axis and flight time in both directions."""
        inward = mars_earth_hohmann()
        outward = earth_mars_hohmann()
        assert inward.sma().m == pytest.approx(outward.sma().m, rel=1e-9)
        assert inward.time_of_flight().seconds == pytest.approx(
            outward.time_of_flight().seconds, rel=1e-9)

    def test_anomalies(self):
        """Arrival half a revolution after departure."""
        transfer = mars_earth_hohmann()
        assert transfer.origin_true_anomaly_departure() == pytest.approx(0.0, abs=1e-12)
        assert transfer.target_true_anomaly_arrival() == pytest.approx(np.pi)

    def test_phase(self):
        """Earth trails Mars at departure."""
        transfer = mars_earth_hohmann()
        assert transfer.phase() == pytest.approx(-1.311, abs=0.01)

    def test_slower_burn_arrives_earlier(self, earth, mars):
        """A deeper retrograde burn reaches the inner orbit before apoapsis."""
        transfer = Transfer(mars, earth)
        hohmann = transfer.time_of_flight().seconds
        transfer.set_delta_v(transfer.delta_v_hohmann().mps - 1000.0)
        assert transfer.eccentricity() < -0.2075
        assert transfer.target_true_anomaly_arrival() < np.pi
        assert transfer.time_of_flight().seconds < hohmann


class TestCircular:
    """Test the degenerate circular transfer."""

    def test_same_orbit(self, earth):
        """Same origin and target gives a circle."""
        transfer = Transfer(earth, earth)
        assert transfer.eccentricity() == 0.0
        assert transfer.is_circular()

    def test_half_revolution(self, earth):
        """The circular transfer lasts half a period."""
        transfer = Transfer(earth, earth)
        assert transfer.target_true_anomaly_arrival() == np.pi
        assert transfer.time_of_flight().seconds == pytest.approx(earth.period() / 2, rel=1e-9)

    def test_target_opposite_origin(self, earth):
        """The target meets the craft after half an orbit."""
        transfer = Transfer(earth, earth)
        assert transfer.phase() == pytest.approx(0.0, abs=1e-9)

    def test_snap_threshold(self, earth):
        """A tiny burn still counts as circular."""
        transfer = Transfer(earth, earth)
        transfer.set_delta_v(Velocity.from_mmps(1e-3))
        assert transfer.is_circular()
        with temp_config(SNAP_TO_CIRCULAR=1e-15):
            assert not transfer.is_circular()


class TestNonHohmann:
    """Test elliptic transfers with a larger burn."""

    @pytest.fixture
    def fast(self, earth, mars):
        transfer = Transfer(earth, mars)
        transfer.set_delta_v(transfer.delta_v_hohmann().mps + 1000.0)
        return transfer

    def test_more_eccentric(self, fast, earth, mars):
        """A larger burn gives a more eccentric ellipse."""
        assert fast.eccentricity() > Transfer(earth, mars).eccentricity()
        assert fast.eccentricity() < 1

    def test_arrives_before_apoapsis(self, fast):
        """The target orbit is crossed before half a revolution."""
        assert 0 < fast.target_true_anomaly_arrival() < np.pi

    def test_shorter_flight(self, fast, earth, mars):
        """A larger burn arrives sooner."""
        assert fast.time_of_flight().seconds < Transfer(earth, mars).time_of_flight().seconds

    def test_kepler_cross_check(self, fast):
        """Flight time agrees with the half-angle form of Kepler's equation."""
        nu = fast.target_true_anomaly_arrival()
        assert fast.time_of_flight().seconds == pytest.approx(elliptic_time(fast, nu), rel=1e-6)

    def test_arrival_radius(self, fast, mars):
        """The arrival anomaly lies on the target orbit."""
        nu = fast.target_true_anomaly_arrival()
        radius = fast.semi_latus_rectum() / (1 + fast.eccentricity() * np.cos(nu))
        assert radius == pytest.approx(mars.sma.m, rel=1e-4)

    @pytest.mark.parametrize("extra", [0.0, 250.0, 500.0, 1000.0, 2000.0])
    def test_phase_in_range(self, earth, mars, extra):
        """Phase stays in (-pi, pi]."""
        transfer = Transfer(earth, mars)
        transfer.set_delta_v(transfer.delta_v_hohmann().mps + extra)
        assert -np.pi < transfer.phase() <= np.pi


class TestHyperbolic:
    """Test hyperbolic transfers."""

    @pytest.fixture
    def escape(self, earth, jupiter):
        return Transfer(earth, jupiter, delta_v=Velocity.from_kps(20.0))

    def test_shape(self, escape, earth):
        """e > 1 and a negative semi-major axis."""
        v = earth.orbital_velocity().mps + 20000.0
        assert escape.is_hyperbolic()
        assert escape.eccentricity() == pytest.approx(
            (v / earth.orbital_velocity().mps)**2 - 1, rel=1e-9)
        assert escape.eccentricity() == pytest.approx(1.794, abs=0.01)
        assert escape.sma().m < 0

    def test_flight_time_finite(self, escape):
        """Flight time is positive and finite."""
        seconds = escape.time_of_flight().seconds
        assert seconds > 0
        assert np.isfinite(seconds)

    def test_arrival_below_asymptote(self, escape):
        """The arrival anomaly is short of the asymptote."""
        limit = np.arccos(-1 / escape.eccentricity())
        assert 0 < escape.target_true_anomaly_arrival() < limit

    def test_kepler_cross_check(self, escape):
        """Flight time agrees with the hyperbolic half-angle form."""
        nu = escape.target_true_anomaly_arrival()
        assert escape.time_of_flight().seconds == pytest.approx(
            hyperbolic_time(escape, nu), rel=1e-6)

    def test_faster_is_shorter(self, earth, jupiter):
        """More delta-v means a shorter flight."""
        slow = Transfer(earth, jupiter, delta_v=Velocity.from_kps(20.0))
        fast = Transfer(earth, jupiter, delta_v=Velocity.from_kps(25.0))
        assert fast.time_of_flight().seconds < slow.time_of_flight().seconds

    def test_phase_in_range(self, escape):
        """Phase stays in (-pi, pi]."""
        assert -np.pi < escape.phase() <= np.pi

    def test_branch_logged(self, escape, caplog):
        """The Kepler branch is logged at DEBUG."""
        with caplog.at_level(logging.DEBUG, logger='planetary_transfer.transfer'):
            escape.time_of_flight()
        assert "hyperbolic branch" in caplog.text


class TestVelocityRange:
    """Test the allowed burn range."""

    def test_outward_range(self, earth, mars):
        """From the Hohmann burn up by 60% of the Hohmann speed."""
        transfer = Transfer(earth, mars)
        low, high = transfer.velocity_range()
        assert low == transfer.delta_v_hohmann()
        assert high.mps == pytest.approx(
            transfer.delta_v_hohmann().mps + 0.6 * transfer.velocity_hohmann().mps)

    def test_inward_range_reversed(self):
        """Inward, the far end is below the Hohmann burn."""
        transfer = mars_earth_hohmann()
        low, high = transfer.velocity_range()
        assert high.mps < low.mps
        assert high.mps == pytest.approx(
            transfer.delta_v_hohmann().mps - 0.6 * transfer.velocity_hohmann().mps)

    def test_span_configurable(self, earth, mars):
        """LAUNCH_VELOCITY_SPAN scales the range."""
        transfer = Transfer(earth, mars)
        with temp_config(LAUNCH_VELOCITY_SPAN=0.3):
            high = transfer.max_velocity().mps
        assert high == pytest.approx(
            transfer.delta_v_hohmann().mps + 0.3 * transfer.velocity_hohmann().mps)

    def test_clamp(self, earth, mars):
        """Burns outside the range are clamped to its ends."""
        transfer = Transfer(earth, mars)
        low, high = transfer.velocity_range()
        assert transfer.clamp_delta_v(Velocity.from_kps(100.0)).mps == pytest.approx(high.mps)
        assert transfer.clamp_delta_v(Velocity.from_kps(0.0)).mps == pytest.approx(low.mps)

    def test_clamp_keeps_valid(self, earth, mars):
        """A burn inside the range is returned unchanged."""
        transfer = Transfer(earth, mars)
        burn = Velocity.from_kps(4.0)
        assert transfer.clamp_delta_v(burn) is burn

    def test_clamp_inward(self):
        """Clamping honors a reversed range."""
        transfer = mars_earth_hohmann()
        low, high = transfer.velocity_range()
        assert transfer.clamp_delta_v(Velocity.from_kps(5.0)).mps == pytest.approx(low.mps)
        assert transfer.clamp_delta_v(Velocity.from_kps(-50.0)).mps == pytest.approx(high.mps)


class TestExport:
    """Test summary and tabular export."""

    def test_summary_keys(self):
        """summary holds the derived quantities."""
        summary = earth_mars_hohmann().summary()
        for key in ('sma', 'eccentricity', 'delta_v', 'launch_velocity',
                    'time_of_flight', 'phase', 'target_true_anomaly_arrival'):
            assert key in summary
        assert summary['phase'] == pytest.approx(earth_mars_hohmann().phase())

    def test_dataframe_columns(self):
        """The arc table has anomaly, radius, position and time."""
        df = earth_mars_hohmann().to_dataframe(n_points=50)
        assert isinstance(df, pd.DataFrame)
        assert list(df.columns) == ['true_anomaly', 'radius', 'x', 'y', 'time']
        assert len(df) == 50

    def test_dataframe_endpoints(self, earth, mars):
        """The arc runs from the origin orbit to the target orbit."""
        transfer = Transfer(earth, mars)
        df = transfer.to_dataframe(n_points=20)
        assert df['radius'].iloc[0] == pytest.approx(earth.sma.m, rel=1e-9)
        assert df['radius'].iloc[-1] == pytest.approx(mars.sma.m, rel=1e-9)
        assert df['time'].iloc[0] == pytest.approx(0.0, abs=1e-6)
        assert df['time'].iloc[-1] == pytest.approx(transfer.time_of_flight().seconds)

    def test_dataframe_time_increases(self):
        """Time grows along the arc."""
        df = mars_earth_hohmann().to_dataframe(n_points=30)
        assert (np.diff(df['time'].to_numpy()) > 0).all()

    def test_dataframe_default_size(self):
        """Default sample count follows the config."""
        with temp_config(DEFAULT_PLOT_POINTS=16):
            assert len(earth_mars_hohmann().to_dataframe()) == 16

    def test_dataframe_too_few_points(self):
        """At least two samples are needed."""
        with pytest.raises(ValueError, match="at least 2"):
            earth_mars_hohmann().to_dataframe(n_points=1)

    def test_str(self):
        """The text report shows flight time and phase."""
        text = str(earth_mars_hohmann())
        assert text.startswith("Transfer:")
        assert "time of flight" in text
        assert "months" in text
        assert "phase angle" in text
