"""Shared fixtures for the planetary_transfer test suite."""

import matplotlib
matplotlib.use('Agg')  # no display during tests

import pytest

from planetary_transfer import config, Mass, Distance, Parent, Planet


@pytest.fixture(autouse=True)
def reset_config():
    """Restore package defaults after every test."""
    yield
    config.reset()


@pytest.fixture
def sun():
    return Parent(Mass.from_solar(1.0), name='Sun')


@pytest.fixture
def earth(sun):
    return Planet(Distance.from_au(1.0), sun, name='Earth')


@pytest.fixture
def mars(sun):
    return Planet(Distance.from_au(1.52366), sun, name='Mars')


@pytest.fixture
def jupiter(sun):
    return Planet(Distance.from_au(5.0), sun, name='Jupiter')
