"""
Imagery sources for the night-lights terrain.

Provides access to:
- NASA GIBS VIIRS Black Marble nighttime lights (Web Mercator PNG tiles)
"""

from .night_lights import NightLightsSource, create_night_lights_source, decode_tile

__all__ = [
    "NightLightsSource",
    "create_night_lights_source",
    "decode_tile",
]
