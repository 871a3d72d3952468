"""
Configuration dataclasses for the night-lights terrain layer.

Centralizes the tile service URL, the hosted level range and the
luminance-to-height mapping.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class SourceConfig:
    """Remote tile service settings."""

    # NASA GIBS VIIRS Black Marble (2016), Web Mercator, 256px PNG tiles
    url_template: str = (
        "https://gibs.earthdata.nasa.gov/wmts/epsg3857/best/VIIRS_Black_Marble/"
        "default/2016-01-01/GoogleMapsCompatible_Level8/{level}/{row}/{col}.png"
    )
    attribution: str = (
        "Imagery provided by services from the Global Imagery Browse Services "
        "(GIBS), operated by the NASA/GSFC/Earth Science Data and Information "
        "System (ESDIS) with funding provided by NASA/HQ."
    )
    thumbnail_url: str = (
        "https://gibs.earthdata.nasa.gov/wmts/epsg3857/best/VIIRS_Black_Marble/"
        "default/2016-01-01/GoogleMapsCompatible_Level8/7/54/75.png"
    )

    # Pyramid advertised by the scheme vs. levels that actually hold tiles
    advertised_levels: int = 10
    first_level: int = 1
    last_level: int = 8

    tile_size: int = 256
    timeout: int = 30  # seconds
    user_agent: str = "NightRelief/0.1"


@dataclass
class TerrainConfig:
    """Luminance to elevation mapping."""

    # 0.75 luminance becomes 63,750 m
    exaggeration_factor: float = 85000.0
    no_data_value: float = -1.0

    def __post_init__(self) -> None:
        if self.exaggeration_factor < 0:
            raise ValueError(
                f"exaggeration_factor must be >= 0, got {self.exaggeration_factor}"
            )


@dataclass
class NightReliefConfig:
    """Master configuration."""

    sources: SourceConfig = field(default_factory=SourceConfig)
    terrain: TerrainConfig = field(default_factory=TerrainConfig)
    output_dir: Path = field(default_factory=lambda: Path("output/night-relief"))
