#!/usr/bin/env python3
"""Tests for the command-line interface."""
import numpy as np
import pytest
from PIL import Image

from conftest import FakeResponse, encode_png
from night_relief import cli
from night_relief.elevation_layer import ElevationGrid
from night_relief.sources import NightLightsSource


@pytest.fixture
def served_tile(monkeypatch):
    """Serve the same 4×4 tile for every request."""
    rgba = np.zeros((4, 4, 4), dtype=np.uint8)
    rgba[:2, :, :3] = 255
    png = encode_png(rgba)
    requested = []

    def fake_get(self, url):
        requested.append(url)
        return FakeResponse(200, png)

    monkeypatch.setattr(NightLightsSource, "_get", fake_get)
    return requested


class TestHeightmapImage:
    """Tests for heightmap rendering."""

    def test_scales_to_full_range(self):
        grid = ElevationGrid(
            values=np.array([0, 500, 1000, 2000], dtype=np.float64), width=2, height=2
        )
        image = cli.heightmap_image(grid, exaggeration_factor=1000)
        assert image.size == (2, 2)
        pixels = np.array(image)
        assert pixels.tolist() == [[0, 128], [255, 255]]

    def test_zero_factor_is_black(self):
        grid = ElevationGrid(values=np.zeros(4, dtype=np.float64), width=2, height=2)
        assert np.array(cli.heightmap_image(grid, 0)).max() == 0


class TestCommands:
    """Tests for CLI subcommands."""

    def test_levels(self, capsys):
        assert cli.main(["levels"]) == 0
        out = capsys.readouterr().out
        lines = [line for line in out.splitlines() if line.strip()[:1].isdigit()]
        assert [int(line.split()[0]) for line in lines] == list(range(1, 9))

    def test_info(self, capsys):
        assert cli.main(["info"]) == 0
        out = capsys.readouterr().out
        assert "VIIRS_Black_Marble" in out
        assert "85,000" in out

    def test_no_command_prints_help(self, capsys):
        assert cli.main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()

    def test_tile_by_address(self, served_tile, capsys, tmp_path):
        output = tmp_path / "out" / "height.png"
        code = cli.main([
            "tile", "--level", "3", "--row", "2", "--col", "5",
            "--exaggeration", "1000", "-o", str(output),
        ])
        assert code == 0
        assert served_tile[0].endswith("/3/2/5.png")
        out = capsys.readouterr().out
        assert "max=1000.0 m" in out
        with Image.open(output) as img:
            heights = np.array(img)
        assert heights.shape == (4, 4)
        assert heights[0, 0] == 255
        assert heights[3, 3] == 0

    def test_tile_by_location(self, served_tile, capsys):
        assert cli.main(["tile", "--level", "1", "--lat", "45", "--lng", "-90"]) == 0
        assert served_tile[0].endswith("/1/0/0.png")

    def test_tile_outside_hosted_levels(self, served_tile, capsys):
        assert cli.main(["tile", "--level", "0", "--row", "0", "--col", "0"]) == 1
        assert "outside supported range" in capsys.readouterr().err
        assert served_tile == []

    def test_tile_requires_position(self, capsys):
        assert cli.main(["tile", "--level", "3"]) == 1
        assert "--lat/--lng" in capsys.readouterr().err
