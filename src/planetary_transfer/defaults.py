"""
Default Inputs and Predefined Transfers
=======================================

Input bounds and default values of the interactive calculator, predefined
parent bodies, and factory functions for commonly-used transfers. The
factory functions build fresh objects on every call.

Examples
--------
>>> from planetary_transfer import earth_mars_hohmann
>>> transfer = earth_mars_hohmann()
>>> transfer.time_of_flight().smallest_unit().round_to(2)
TimeValue(value=8.5, unit='months')
"""
from .quantities import Mass, Distance, Velocity
from .bodies import Parent, Planet
from .transfer import Transfer

"""
Bounds of the interactive inputs
"""
SMA_MIN = Distance.from_km(10.0)
SMA_MAX = Distance.from_au(50.0)

MASS_MIN = Mass.from_lunar(0.05)
MASS_MAX = Mass.from_solar(100.0)

"""
Initial values of the interactive inputs
"""
DEFAULT_ORIGIN_SMA = Distance.from_au(1.0)
DEFAULT_TARGET_SMA = Distance.from_au(1.52366)
DEFAULT_MASS = Mass.from_solar(1.0)
DEFAULT_VELOCITY = Velocity.from_kps(3.0)
DEFAULT_HOHMANN = True

"""
Predefined parent bodies
"""
SUN = Parent(Mass.from_solar(1.0), name='Sun')
EARTH = Parent(Mass.from_earth(1.0), name='Earth')
JUPITER = Parent(Mass.from_jovian(1.0), name='Jupiter')

"""
Predefined orbital radii
"""
EARTH_SMA = Distance.from_au(1.0)
MARS_SMA = Distance.from_au(1.52366)


def earth_mars_hohmann():
    """
    Create the Hohmann transfer from Earth's orbit to Mars' orbit.

    Returns
    -------
    Transfer
        Outward Hohmann transfer around the Sun
    """
    return Transfer(Planet(EARTH_SMA, SUN, name='Earth'),
                    Planet(MARS_SMA, SUN, name='Mars'))


def mars_earth_hohmann():
    """
    Create the Hohmann transfer from Mars' orbit back to Earth's orbit.

    Returns
    -------
    Transfer
        Inward Hohmann transfer around the Sun
    """
    return Transfer(Planet(MARS_SMA, SUN, name='Mars'),
                    Planet(EARTH_SMA, SUN, name='Earth'))


def default_transfer():
    """
    Create the transfer shown when the calculator starts.

    Returns
    -------
    Transfer
        Hohmann transfer built from the default inputs
    """
    parent = Parent(DEFAULT_MASS)
    return Transfer(Planet(DEFAULT_ORIGIN_SMA, parent),
                    Planet(DEFAULT_TARGET_SMA, parent))
