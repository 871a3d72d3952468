#!/usr/bin/env python3
"""
Command-line interface for inspecting the night-lights terrain layer.

Usage:
    # Show hosted levels of detail
    python -m night_relief.cli levels

    # Show data source information
    python -m night_relief.cli info

    # Fetch one elevation tile at a location and save a heightmap
    python -m night_relief.cli tile --lat 40.71 --lng -74.0 --level 6 -o nyc.png

    # Fetch by tile address
    python -m night_relief.cli tile --level 3 --row 2 --col 2
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import numpy as np
from PIL import Image

from .config import NightReliefConfig
from .elevation_layer import ElevationGrid, LuminanceElevationLayer
from .errors import NightReliefError
from .sources.night_lights import create_night_lights_source
from .tiling import tile_bounds_wgs84, wgs84_to_tile


def heightmap_image(grid: ElevationGrid, exaggeration_factor: float) -> Image.Image:
    """Render an elevation grid as an 8-bit greyscale image."""
    heights = grid.as_array()
    if exaggeration_factor > 0:
        normalized = np.clip(heights / exaggeration_factor, 0.0, 1.0)
    else:
        normalized = np.zeros_like(heights)
    return Image.fromarray((normalized * 255).round().astype(np.uint8))


def cmd_levels(args: argparse.Namespace) -> int:
    """List hosted levels of detail."""
    config = NightReliefConfig()
    source = create_night_lights_source(config.sources)
    geometry = asyncio.run(source.load())

    print(f"Tile size: {geometry.tile_size}px, EPSG:{geometry.wkid}")
    print(f"{'Level':>5}  {'Resolution (m/px)':>18}  {'Scale':>16}")
    for lod in geometry.lods:
        print(f"{lod.level:>5}  {lod.resolution:>18.3f}  {lod.scale:>16.1f}")
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    """Show information about the imagery source."""
    config = NightReliefConfig()

    print("Imagery:")
    print(f"  Tiles: {config.sources.url_template}")
    print(f"  Thumbnail: {config.sources.thumbnail_url}")
    print(f"  Hosted levels: {config.sources.first_level}..{config.sources.last_level}")
    print(f"  Attribution: {config.sources.attribution}")
    print("\nTerrain:")
    print(f"  Exaggeration factor: {config.terrain.exaggeration_factor:,.0f}")
    print(f"  No-data value: {config.terrain.no_data_value}")
    return 0


async def _fetch_elevation(
    layer: LuminanceElevationLayer, level: int, row: int, col: int
) -> ElevationGrid:
    await layer.load()
    return await layer.fetch_tile(level, row, col)


def cmd_tile(args: argparse.Namespace) -> int:
    """Fetch one elevation tile and print statistics."""
    config = NightReliefConfig()

    if args.lat is not None and args.lng is not None:
        row, col = wgs84_to_tile(args.lng, args.lat, args.level)
    elif args.row is not None and args.col is not None:
        row, col = args.row, args.col
    else:
        print("Error: provide --lat/--lng or --row/--col", file=sys.stderr)
        return 1

    factor = args.exaggeration if args.exaggeration is not None else config.terrain.exaggeration_factor
    try:
        layer = LuminanceElevationLayer(
            exaggeration_factor=factor,
            config=config.terrain,
            source_config=config.sources,
        )
        grid = asyncio.run(_fetch_elevation(layer, args.level, row, col))
    except (NightReliefError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    bounds = tile_bounds_wgs84(args.level, row, col)
    print(f"Tile: {args.level}/{row}/{col} ({grid.width}×{grid.height})")
    print(f"Bounds: W={bounds[0]:.4f}, S={bounds[1]:.4f}, E={bounds[2]:.4f}, N={bounds[3]:.4f}")
    print(
        f"Elevation: min={grid.values.min():.1f} m, "
        f"max={grid.values.max():.1f} m, mean={grid.values.mean():.1f} m"
    )

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        heightmap_image(grid, factor).save(output_path)
        print(f"Saved heightmap to: {output_path}")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Nighttime-lights relief terrain",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("levels", help="List hosted levels of detail")
    subparsers.add_parser("info", help="Show data source information")

    tile_parser = subparsers.add_parser("tile", help="Fetch one elevation tile")
    tile_parser.add_argument("--level", type=int, required=True, help="Zoom level")
    tile_parser.add_argument("--row", type=int, help="Tile row")
    tile_parser.add_argument("--col", type=int, help="Tile column")
    tile_parser.add_argument("--lat", type=float, help="Latitude")
    tile_parser.add_argument("--lng", type=float, help="Longitude")
    tile_parser.add_argument("--exaggeration", type=float, help="Meters per unit luminance")
    tile_parser.add_argument("--output", "-o", help="Heightmap PNG output path")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "levels":
        return cmd_levels(args)
    elif args.command == "info":
        return cmd_info(args)
    elif args.command == "tile":
        return cmd_tile(args)
    else:
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())
