"""
Synthetic terrain built from nighttime-lights imagery.

Each pixel of a Black Marble tile is converted to its relative luminance
and multiplied by an exaggeration factor, so brightly lit cities rise out
of the ground as mountains:

    elevation = luminance(R, G, B) × exaggeration_factor

With the default factor of 85,000, a luminance of 0.75 becomes a height
of 63,750 m. The layer borrows the tiling scheme of its imagery source so
terrain samples line up with the draped 2D imagery.
"""

import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import Any, Optional

import numpy as np
from numpy.typing import NDArray

from .color_space import rgba_to_luminance
from .config import SourceConfig, TerrainConfig
from .errors import GeometryNotReadyError, NightReliefError, TileUnavailableError
from .sources.night_lights import NightLightsSource, create_night_lights_source
from .tiling import TileAddress, TileGeometry

logger = logging.getLogger(__name__)


class LoadState(enum.Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"


@dataclass
class ElevationGrid:
    """Height samples for one tile, in row-major order."""

    values: NDArray[np.float64]
    width: int
    height: int
    no_data_value: float = -1.0

    def __post_init__(self) -> None:
        if len(self.values) != self.width * self.height:
            raise ValueError(
                f"Expected {self.width * self.height} values for "
                f"{self.width}×{self.height} grid, got {len(self.values)}"
            )

    def to_dict(self) -> dict[str, Any]:
        """Host contract shape: values, width, height, noDataValue."""
        return {
            "values": self.values.tolist(),
            "width": self.width,
            "height": self.height,
            "noDataValue": self.no_data_value,
        }

    def as_array(self) -> NDArray[np.float64]:
        """View the samples as a (height, width) array."""
        return self.values.reshape(self.height, self.width)


def elevation_from_rgba(
    rgba: NDArray[np.uint8],
    exaggeration_factor: float,
    no_data_value: float = -1.0,
) -> ElevationGrid:
    """Convert an RGBA tile to an elevation grid.

    Args:
        rgba: Image of shape (H, W, 4); alpha is read but ignored
        exaggeration_factor: Meters of height per unit luminance
        no_data_value: Sentinel reported to the host; never produced here

    Returns:
        ElevationGrid with width W, height H and W*H samples
    """
    height, width = rgba.shape[:2]
    luminance = rgba_to_luminance(rgba)
    values = (luminance * exaggeration_factor).astype(np.float64).ravel()
    return ElevationGrid(
        values=values,
        width=int(width),
        height=int(height),
        no_data_value=no_data_value,
    )


class LuminanceElevationLayer:
    """Elevation provider whose heights come from image luminance.

    Wraps a NightLightsSource rather than extending it: geometry and tile
    fetching are delegated, only the pixel-to-height step lives here.

    Usage:
        layer = LuminanceElevationLayer()
        await layer.load()
        grid = await layer.fetch_tile(4, 5, 8)
    """

    def __init__(
        self,
        source: Optional[NightLightsSource] = None,
        exaggeration_factor: Optional[float] = None,
        no_data_value: Optional[float] = None,
        config: Optional[TerrainConfig] = None,
        source_config: Optional[SourceConfig] = None,
    ):
        """Initialize the layer.

        Args:
            source: Imagery source; a Black Marble source is built if None
            exaggeration_factor: Overrides config.exaggeration_factor
            no_data_value: Overrides config.no_data_value
            config: Terrain settings (uses defaults if None)
            source_config: Settings for the built source when source is None
        """
        config = config or TerrainConfig()
        factor = config.exaggeration_factor if exaggeration_factor is None else exaggeration_factor
        if factor < 0:
            raise ValueError(f"exaggeration_factor must be >= 0, got {factor}")

        self._source = source or create_night_lights_source(source_config)
        self._exaggeration_factor = float(factor)
        self._no_data_value = float(
            config.no_data_value if no_data_value is None else no_data_value
        )
        self._state = LoadState.UNLOADED
        self._tile_info: Optional[TileGeometry] = None
        self._load_task: Optional[asyncio.Task] = None

    @property
    def source(self) -> NightLightsSource:
        return self._source

    @property
    def exaggeration_factor(self) -> float:
        return self._exaggeration_factor

    @property
    def no_data_value(self) -> float:
        return self._no_data_value

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def loaded(self) -> bool:
        return self._state is LoadState.LOADED

    @property
    def tile_info(self) -> TileGeometry:
        """Tiling scheme adopted from the source.

        Raises:
            GeometryNotReadyError: Until load() completes
        """
        if self._state is not LoadState.LOADED or self._tile_info is None:
            raise GeometryNotReadyError(
                f"Elevation layer is {self._state.value}; await load() first"
            )
        return self._tile_info

    async def load(self) -> "LuminanceElevationLayer":
        """Resolve the source geometry and adopt it.

        Concurrent callers share one in-flight load. On failure the layer
        returns to UNLOADED and the error propagates.
        """
        if self._state is LoadState.LOADED:
            return self
        if self._load_task is None:
            self._state = LoadState.LOADING
            self._load_task = asyncio.ensure_future(self._load())
        try:
            await asyncio.shield(self._load_task)
        finally:
            if self._load_task is not None and self._load_task.done():
                self._load_task = None
        return self

    async def _load(self) -> None:
        try:
            geometry = await self._source.load()
        except Exception:
            self._state = LoadState.UNLOADED
            logger.exception("Failed to load elevation layer source")
            raise
        self._tile_info = geometry
        self._state = LoadState.LOADED
        logger.info(
            "Elevation layer loaded: levels %d..%d, %dpx tiles, exaggeration %.0f",
            geometry.min_level, geometry.max_level,
            geometry.tile_size, self._exaggeration_factor,
        )

    async def fetch_tile(self, level: int, row: int, col: int) -> ElevationGrid:
        """Fetch a tile and convert its pixels to elevations.

        Args:
            level: Zoom level
            row: Tile row
            col: Tile column

        Returns:
            ElevationGrid with one sample per pixel

        Raises:
            GeometryNotReadyError: If called before load() completes
            TileUnavailableError: If the address is outside the geometry
            NetworkFetchError: On network or decoding failure
        """
        geometry = self.tile_info
        # Reject bad addresses before touching the network
        try:
            address = TileAddress(level, row, col)
        except ValueError as e:
            raise TileUnavailableError(str(e)) from e
        if not geometry.contains(address):
            raise TileUnavailableError(
                f"Tile {address} outside supported range "
                f"{geometry.min_level}..{geometry.max_level}",
                address,
            )

        try:
            rgba = await self._source.fetch_tile(level, row, col)
        except NightReliefError as e:
            logger.warning("Tile %s/%s/%s unavailable: %s", level, row, col, e)
            raise

        grid = elevation_from_rgba(rgba, self._exaggeration_factor, self._no_data_value)
        logger.debug(
            "Tile %s: %dx%d samples, max %.1f m",
            address, grid.width, grid.height,
            float(grid.values.max()) if len(grid.values) else 0.0,
        )
        return grid
