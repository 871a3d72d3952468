"""
VIIRS Black Marble nighttime-lights tile fetcher.

Fetches tiles from NASA GIBS (or any URL-template tile service with
{level}, {row}, {col} placeholders). The service advertises the full
GoogleMapsCompatible pyramid, but only levels 1 through 8 actually exist
on the server, so the geometry is truncated before any tile is requested.

The same source type backs both the draped 2D imagery and the synthetic
terrain, which keeps the two aligned pixel for pixel.
"""

import asyncio
import io
import logging
from typing import Callable, Optional

import numpy as np
from numpy.typing import NDArray
import requests
from PIL import Image, UnidentifiedImageError

from ..config import SourceConfig
from ..errors import GeometryNotReadyError, NetworkFetchError, TileUnavailableError
from ..tiling import TileAddress, TileGeometry, web_mercator_geometry

logger = logging.getLogger(__name__)

# Status codes meaning "no tile here" rather than a failed request
NOT_FOUND_STATUS = (204, 404)


class NightLightsSource:
    """Fetches and decodes nighttime-lights image tiles."""

    def __init__(
        self,
        config: Optional[SourceConfig] = None,
        session_factory: Optional[Callable[[], requests.Session]] = None,
    ):
        """Initialize the tile source.

        Args:
            config: Service settings (uses defaults if None)
            session_factory: Builds one HTTP session per fetch;
                requests.Session if None
        """
        self.config = config or SourceConfig()
        self.session_factory = session_factory or requests.Session
        self._geometry: Optional[TileGeometry] = None

    @property
    def url_template(self) -> str:
        return self.config.url_template

    @property
    def attribution(self) -> str:
        return self.config.attribution

    @property
    def thumbnail_url(self) -> str:
        return self.config.thumbnail_url

    @property
    def loaded(self) -> bool:
        return self._geometry is not None

    @property
    def geometry(self) -> TileGeometry:
        """Truncated tiling scheme.

        Raises:
            GeometryNotReadyError: If load() has not completed
        """
        if self._geometry is None:
            raise GeometryNotReadyError("Tile source geometry not resolved; call load() first")
        return self._geometry

    async def resolve_geometry(self) -> TileGeometry:
        """Build the advertised pyramid and truncate it to the hosted levels.

        Truncation happens once; later calls return the stored geometry.

        Returns:
            Geometry restricted to config.first_level..config.last_level
        """
        if self._geometry is not None:
            return self._geometry

        advertised = web_mercator_geometry(
            level_count=self.config.advertised_levels,
            tile_size=self.config.tile_size,
        )
        geometry = advertised.truncate(self.config.first_level, self.config.last_level)
        self._geometry = geometry
        logger.debug(
            "Truncated %d advertised levels to %d..%d",
            len(advertised.lods), geometry.min_level, geometry.max_level,
        )
        return geometry

    async def load(self) -> TileGeometry:
        """Resolve the geometry; alias kept for layer-style call sites."""
        return await self.resolve_geometry()

    def tile_url(self, level: int, row: int, col: int) -> str:
        """Substitute the tile address into the URL template."""
        return self.url_template.format(level=int(level), row=int(row), col=int(col))

    def _check_address(self, level: int, row: int, col: int) -> TileAddress:
        try:
            address = TileAddress(level, row, col)
        except ValueError as e:
            raise TileUnavailableError(str(e)) from e
        if not self.geometry.contains(address):
            raise TileUnavailableError(
                f"Tile {address} outside hosted levels "
                f"{self.geometry.min_level}..{self.geometry.max_level}",
                address,
            )
        return address

    def _get(self, url: str) -> requests.Response:
        # Sessions are not shared between worker threads
        with self.session_factory() as session:
            session.headers.update({"User-Agent": self.config.user_agent})
            return session.get(url, timeout=self.config.timeout)

    async def fetch_tile_bytes(self, level: int, row: int, col: int) -> bytes:
        """Fetch the raw encoded tile.

        Raises:
            GeometryNotReadyError: If load() has not completed
            TileUnavailableError: If the address is not hosted
            NetworkFetchError: On connection errors, timeouts or HTTP errors
        """
        address = self._check_address(level, row, col)
        url = self.tile_url(level, row, col)
        logger.debug("Fetching tile %s from %s", address, url)

        try:
            response = await asyncio.to_thread(self._get, url)
        except requests.RequestException as e:
            raise NetworkFetchError(f"Request for tile {address} failed: {e}", address) from e

        if response.status_code in NOT_FOUND_STATUS:
            raise TileUnavailableError(
                f"Tile {address} not found on server (HTTP {response.status_code})",
                address,
            )
        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise NetworkFetchError(f"Request for tile {address} failed: {e}", address) from e

        return response.content

    async def fetch_tile(self, level: int, row: int, col: int) -> NDArray[np.uint8]:
        """Fetch a tile and decode it to RGBA.

        Args:
            level: Zoom level
            row: Tile row (Web Mercator Y)
            col: Tile column (Web Mercator X)

        Returns:
            RGBA image as numpy array of shape (H, W, 4), typically 256×256

        Raises:
            GeometryNotReadyError: If load() has not completed
            TileUnavailableError: If the address is not hosted
            NetworkFetchError: On network or decoding failure
        """
        data = await self.fetch_tile_bytes(level, row, col)
        try:
            return decode_tile(data)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
            raise NetworkFetchError(
                f"Could not decode tile {level}/{row}/{col}: {e}",
                TileAddress(level, row, col),
            ) from e


def decode_tile(data: bytes) -> NDArray[np.uint8]:
    """Decode an encoded image (PNG, JPEG, ...) to an RGBA array."""
    with Image.open(io.BytesIO(data)) as img:
        return np.array(img.convert("RGBA"))


def create_night_lights_source(
    config: Optional[SourceConfig] = None,
    session_factory: Optional[Callable[[], requests.Session]] = None,
) -> NightLightsSource:
    """Build a Black Marble source.

    Used for both the draped imagery layer and the terrain layer's
    internal source so that both share one tiling scheme.
    """
    return NightLightsSource(config=config, session_factory=session_factory)
