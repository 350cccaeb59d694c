"""
planetary_transfer: Two-Body Transfers Between Circular Orbits

A Python package computing the transfer orbit, time of flight and departure
phase angle between two circular orbits around a common parent body, for
Hohmann or arbitrary tangential departure burns.
"""

# Configuration
from .config import config, temp_config

# Core classes
from .quantities import Quantity, Mass, Distance, Velocity, Duration, TimeValue
from .bodies import Parent, Planet
from .transfer import Transfer, IncompatibleParentsError

# Predefined bodies and transfers
from .defaults import SUN, EARTH, JUPITER
from .defaults import earth_mars_hohmann, mars_earth_hohmann, default_transfer

# Package metadata
__version__ = "0.1.0"

# Define what gets imported with "from planetary_transfer import *"
__all__ = [
    # Configuration
    "config",
    "temp_config",
    # Classes
    "Quantity",
    "Mass",
    "Distance",
    "Velocity",
    "Duration",
    "TimeValue",
    "Parent",
    "Planet",
    "Transfer",
    "IncompatibleParentsError",
    # Constants
    "SUN",
    "EARTH",
    "JUPITER",
    # Factories
    "earth_mars_hohmann",
    "mars_earth_hohmann",
    "default_transfer",
]
