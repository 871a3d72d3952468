"""
Relative luminance of sRGB pixels.

Luminance here is the CIE Y component of linearized sRGB (IEC 61966-2-1),
which agrees with the WCAG relative luminance reported by chroma.js
(weights 0.2126, 0.7152, 0.0722) to within 1e-4. All operations are
vectorized over whole tiles.

References:
- sRGB to XYZ transformation (IEC 61966-2-1)
- ITU-R BT.709 primaries
"""

import numpy as np
from numpy.typing import NDArray


# sRGB to XYZ transformation matrix (D65)
SRGB_TO_XYZ = np.array([
    [0.4124564, 0.3575761, 0.1804375],
    [0.2126729, 0.7151522, 0.0721750],
    [0.0193339, 0.1191920, 0.9503041]
])

# The Y row; weights sum to slightly above 1, so results are clipped
LUMINANCE_WEIGHTS = SRGB_TO_XYZ[1]


def _srgb_to_linear(srgb: NDArray[np.float64]) -> NDArray[np.float64]:
    """Convert sRGB (gamma-corrected) to linear RGB.

    The sRGB transfer function has a linear portion near black and
    a gamma curve (~2.4) for the rest.
    """
    linear = np.where(
        srgb <= 0.04045,
        srgb / 12.92,
        ((srgb + 0.055) / 1.055) ** 2.4
    )
    return linear


def relative_luminance(rgb: NDArray[np.uint8]) -> NDArray[np.float64]:
    """Compute relative luminance of RGB pixels (0-255).

    Args:
        rgb: Array of shape (..., 3) with uint8 values

    Returns:
        Array of shape (...) with values in [0, 1]. Black is exactly 0
        and white exactly 1.
    """
    rgb_normalized = np.asarray(rgb, dtype=np.float64) / 255.0
    linear = _srgb_to_linear(rgb_normalized)
    return np.clip(linear @ LUMINANCE_WEIGHTS, 0.0, 1.0)


def rgba_to_luminance(rgba: NDArray[np.uint8]) -> NDArray[np.float64]:
    """Relative luminance of an RGBA image; the alpha channel is ignored.

    Args:
        rgba: Image array of shape (H, W, 4)

    Returns:
        Luminance array of shape (H, W)
    """
    if rgba.ndim != 3 or rgba.shape[-1] != 4:
        raise ValueError(f"Expected (H, W, 4) RGBA array, got shape {rgba.shape}")
    return relative_luminance(rgba[..., :3])
