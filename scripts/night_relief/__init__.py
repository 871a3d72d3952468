"""
Nighttime-Lights Relief Terrain

Turns NASA's VIIRS Black Marble nighttime-lights imagery into a synthetic
elevation layer for 3D globes: the brighter a pixel, the higher the
ground, so lit cities stand out as mountain ranges.

- NightLightsSource fetches the imagery tiles and exposes the hosted
  level range (1-8) of the Web Mercator pyramid
- LuminanceElevationLayer adopts that tiling scheme and converts each
  tile's pixels to elevation samples

Usage:
    # List hosted levels
    python -m night_relief.cli levels

    # Fetch one elevation tile and save a heightmap
    python -m night_relief.cli tile --lat 40.71 --lng -74.0 --level 6 --output nyc.png
"""

from .config import NightReliefConfig, SourceConfig, TerrainConfig
from .errors import (
    GeometryNotReadyError,
    NetworkFetchError,
    NightReliefError,
    TileUnavailableError,
)
from .tiling import (
    LevelOfDetail,
    TileAddress,
    TileGeometry,
    truncate_lods,
    web_mercator_geometry,
)
from .color_space import relative_luminance
from .sources import NightLightsSource, create_night_lights_source
from .elevation_layer import (
    ElevationGrid,
    LoadState,
    LuminanceElevationLayer,
    elevation_from_rgba,
)

__all__ = [
    # Config
    "NightReliefConfig",
    "SourceConfig",
    "TerrainConfig",
    # Errors
    "NightReliefError",
    "TileUnavailableError",
    "NetworkFetchError",
    "GeometryNotReadyError",
    # Tiling
    "TileAddress",
    "LevelOfDetail",
    "TileGeometry",
    "truncate_lods",
    "web_mercator_geometry",
    # Imagery and terrain
    "relative_luminance",
    "NightLightsSource",
    "create_night_lights_source",
    "ElevationGrid",
    "LoadState",
    "LuminanceElevationLayer",
    "elevation_from_rgba",
]
__version__ = "0.1.0"
