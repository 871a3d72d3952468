#!/usr/bin/env python3
"""Pytest configuration and shared fixtures."""
import io
import sys
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

# Make the night_relief package importable without installation
sys.path.insert(0, str(Path(__file__).parent.parent))


def encode_png(rgba: np.ndarray) -> bytes:
    """Encode an (H, W, 3|4) uint8 array as PNG bytes."""
    buffer = io.BytesIO()
    Image.fromarray(np.asarray(rgba, dtype=np.uint8)).save(buffer, format="PNG")
    return buffer.getvalue()


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code=200, content=b""):
        self.status_code = status_code
        self.content = content

    def raise_for_status(self):
        import requests

        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


class FakeSession:
    """Records requested URLs and answers from a url -> response mapping."""

    def __init__(self, responses=None, default=None, error=None):
        self.headers = {}
        self.responses = responses or {}
        self.default = default
        self.error = error
        self.requested = []
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.closed = True

    def get(self, url, timeout=None):
        self.requested.append(url)
        if self.error is not None:
            raise self.error
        if url in self.responses:
            return self.responses[url]
        if self.default is not None:
            return self.default
        return FakeResponse(status_code=404)


@pytest.fixture
def sample_rgba():
    """2×2 tile: black, white / mid grey, dark grey (opaque)."""
    return np.array(
        [
            [[0, 0, 0, 255], [255, 255, 255, 255]],
            [[128, 128, 128, 255], [64, 64, 64, 255]],
        ],
        dtype=np.uint8,
    )


@pytest.fixture
def sample_png(sample_rgba):
    return encode_png(sample_rgba)


@pytest.fixture
def fake_session():
    return FakeSession
