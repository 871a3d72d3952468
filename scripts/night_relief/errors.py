"""
Error types raised by the night-lights terrain layer.

Every failure surfaces as an exception on the awaited call. Nothing here
is retried internally; the host decides whether a missing tile means
"no data" and applies its own retry policy to network failures.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .tiling import TileAddress


class NightReliefError(Exception):
    """Base class for all layer errors."""


class TileUnavailableError(NightReliefError, LookupError):
    """Tile address is outside the hosted pyramid or the server has no tile."""

    def __init__(self, message: str, address: Optional["TileAddress"] = None):
        super().__init__(message)
        self.address = address


class NetworkFetchError(NightReliefError):
    """Transient network or image decoding failure."""

    def __init__(self, message: str, address: Optional["TileAddress"] = None):
        super().__init__(message)
        self.address = address


class GeometryNotReadyError(NightReliefError, RuntimeError):
    """Layer or source used before load() completed."""
