"""
Tile pyramid geometry for Web Mercator (EPSG:3857) tile services.

A tile service advertises the full GoogleMapsCompatible pyramid, but a
given dataset may only host a contiguous subset of it. The geometry is
therefore built in two steps: advertise every level, then truncate to the
hosted range. Truncation keeps the original LevelOfDetail objects, so a
level number always refers to the same real-world tile boundaries.
"""

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .errors import TileUnavailableError


# Web Mercator extent and level-0 constants for 256px tiles
WEB_MERCATOR_WKID = 3857
WEB_MERCATOR_ORIGIN = (-20037508.342787, 20037508.342787)
LEVEL0_RESOLUTION = 156543.03392800014  # meters per pixel
LEVEL0_SCALE = 591657527.591555  # scale denominator at 96 dpi


@dataclass(frozen=True)
class TileAddress:
    """One tile in the quad-tree pyramid."""

    level: int
    row: int
    col: int

    def __post_init__(self) -> None:
        if self.level < 0 or self.row < 0 or self.col < 0:
            raise ValueError(
                f"Tile address components must be >= 0, got {self.level}/{self.row}/{self.col}"
            )

    def __str__(self) -> str:
        return f"{self.level}/{self.row}/{self.col}"


@dataclass(frozen=True)
class LevelOfDetail:
    """A single zoom level of the pyramid."""

    level: int
    resolution: float
    scale: float


@dataclass(frozen=True)
class TileGeometry:
    """Tiling scheme shared by the imagery and the synthetic terrain.

    Attributes:
        tile_size: Tile width and height in pixels
        origin: Top-left corner of the grid in projected meters
        wkid: Spatial reference id
        lods: Ordered, contiguous levels of detail
    """

    tile_size: int
    origin: tuple[float, float]
    wkid: int
    lods: tuple[LevelOfDetail, ...]

    @property
    def levels(self) -> list[int]:
        return [lod.level for lod in self.lods]

    @property
    def min_level(self) -> int:
        return self.lods[0].level

    @property
    def max_level(self) -> int:
        return self.lods[-1].level

    def has_level(self, level: int) -> bool:
        return any(lod.level == level for lod in self.lods)

    def lod(self, level: int) -> LevelOfDetail:
        """Look up the level of detail for a zoom level.

        Raises:
            TileUnavailableError: If the level is not part of this geometry
        """
        for lod in self.lods:
            if lod.level == level:
                return lod
        raise TileUnavailableError(
            f"Level {level} outside supported range "
            f"{self.min_level}..{self.max_level}"
        )

    @staticmethod
    def tiles_per_side(level: int) -> int:
        return 2 ** level

    def contains(self, address: TileAddress) -> bool:
        """Check that an address falls inside the hosted pyramid."""
        if not self.has_level(address.level):
            return False
        n = self.tiles_per_side(address.level)
        return address.row < n and address.col < n

    def truncate(self, first_level: int, last_level: int) -> "TileGeometry":
        """Return a copy restricted to levels first_level..last_level."""
        return TileGeometry(
            tile_size=self.tile_size,
            origin=self.origin,
            wkid=self.wkid,
            lods=truncate_lods(self.lods, first_level, last_level),
        )


def web_mercator_lods(level_count: int) -> tuple[LevelOfDetail, ...]:
    """Build levels 0..level_count-1 of the GoogleMapsCompatible pyramid."""
    if level_count <= 0:
        raise ValueError(f"level_count must be positive, got {level_count}")
    return tuple(
        LevelOfDetail(
            level=level,
            resolution=LEVEL0_RESOLUTION / 2 ** level,
            scale=LEVEL0_SCALE / 2 ** level,
        )
        for level in range(level_count)
    )


def web_mercator_geometry(level_count: int = 10, tile_size: int = 256) -> TileGeometry:
    """Full pyramid as advertised by a GoogleMapsCompatible tile service.

    Resolutions assume 256px tiles; other tile sizes scale them so that
    each level still covers the same ground extent.
    """
    lods = web_mercator_lods(level_count)
    if tile_size != 256:
        factor = 256 / tile_size
        lods = tuple(
            LevelOfDetail(lod.level, lod.resolution * factor, lod.scale * factor)
            for lod in lods
        )
    return TileGeometry(
        tile_size=tile_size,
        origin=WEB_MERCATOR_ORIGIN,
        wkid=WEB_MERCATOR_WKID,
        lods=lods,
    )


def truncate_lods(
    lods: Sequence[LevelOfDetail],
    first_level: int,
    last_level: int,
) -> tuple[LevelOfDetail, ...]:
    """Drop unhosted head levels and every level after last_level.

    The retained entries are the original objects; only their positions
    in the sequence change.

    Args:
        lods: Advertised levels, ordered by level
        first_level: Lowest level that exists on the server
        last_level: Highest level backed by tile data

    Returns:
        Contiguous, non-empty tuple of levels

    Raises:
        ValueError: If the range is inverted, empty or has gaps
    """
    if first_level > last_level:
        raise ValueError(f"first_level {first_level} > last_level {last_level}")

    head = 0
    while head < len(lods) and lods[head].level < first_level:
        head += 1
    tail = head
    while tail < len(lods) and lods[tail].level <= last_level:
        tail += 1
    kept = tuple(lods[head:tail])

    if not kept:
        raise ValueError(
            f"No advertised levels within {first_level}..{last_level}"
        )
    for prev, cur in zip(kept, kept[1:]):
        if cur.level != prev.level + 1:
            raise ValueError(f"Levels not contiguous: {prev.level} -> {cur.level}")
    return kept


def tile_bounds_wgs84(level: int, row: int, col: int) -> tuple[float, float, float, float]:
    """Get WGS84 bounds for a Web Mercator tile.

    Returns:
        Tuple of (west, south, east, north) in WGS84 degrees
    """
    n = 2 ** level

    def col_to_lon(col: int) -> float:
        return col / n * 360.0 - 180.0

    def row_to_lat(row: int) -> float:
        lat_rad = np.arctan(np.sinh(np.pi * (1 - 2 * row / n)))
        return float(np.degrees(lat_rad))

    return (col_to_lon(col), row_to_lat(row + 1), col_to_lon(col + 1), row_to_lat(row))


def wgs84_to_tile(lon: float, lat: float, level: int) -> tuple[int, int]:
    """Convert WGS84 coordinates to (row, col) at a zoom level."""
    n = 2 ** level
    col = int((lon + 180.0) / 360.0 * n)
    lat_rad = np.radians(lat)
    row = int((1.0 - np.arcsinh(np.tan(lat_rad)) / np.pi) / 2.0 * n)
    return (min(max(row, 0), n - 1), min(max(col, 0), n - 1))
