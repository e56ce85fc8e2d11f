"""
Metaball renderer — hard-threshold "pixel-art" rasterization.

The field Σ(rᵢ² / dᵢ²) is sampled on a grid with stride ``pixel_size``
and every sample above the threshold becomes one solid
``pixel_size × pixel_size`` block.  There is deliberately no blending:
a block is either lava colour or left untouched.

Painting goes through a minimal *surface* contract so the same code
drives a ``QPainter`` on screen and a numpy image in tests:

    surface.fill_rect(x, y, w, h, rgba)
    surface.draw_text(x, y, text, rgba)
"""

from __future__ import annotations

import logging
import math
from typing import List, Sequence, Tuple

import numpy as np

from .engine import DEFAULT_PARAMS, Bounds, LavaParams, Particle
from .palettes import RGBA

logger = logging.getLogger(__name__)


PLACEMENT_BACKDROP: RGBA = (220, 20, 60, 191)   # crimson, ~75% opaque
TEXT_COLOR: RGBA = (255, 255, 255, 255)
TEXT_SHADOW: RGBA = (0, 0, 0, 255)

PLACEMENT_INSTRUCTIONS: Tuple[str, ...] = (
    "Drag to move",
    "SHIFT + arrows to resize",
    "Arrows to nudge (1 px)",
    "ENTER to save",
)


# ---------------------------------------------------------------------------
# Field evaluation
# ---------------------------------------------------------------------------

def influence_at(
    x: float,
    y: float,
    particles: Sequence[Particle],
    min_distance_sq: float = DEFAULT_PARAMS.min_distance_sq,
) -> float:
    """Metaball potential at one grid point.

    Distances are kept squared (no sqrt); a point sitting exactly on a
    particle centre uses *min_distance_sq* instead of zero.
    """
    total = 0.0
    for p in particles:
        dx = x - p.x
        dy = y - p.y
        dist2 = max(dx * dx + dy * dy, min_distance_sq)
        total += (p.radius * p.radius) / dist2
    return total


def grid_axes(bounds: Bounds, pixel_size: int) -> Tuple[np.ndarray, np.ndarray]:
    """Grid sample coordinates ``(xs, ys)`` covering *bounds*."""
    if bounds.is_empty:
        empty = np.zeros(0, dtype=np.float64)
        return empty, empty
    xs = np.arange(bounds.left, bounds.right, pixel_size, dtype=np.float64)
    ys = np.arange(bounds.top, bounds.bottom, pixel_size, dtype=np.float64)
    return xs, ys


def influence_field(
    bounds: Bounds,
    particles: Sequence[Particle],
    params: LavaParams = DEFAULT_PARAMS,
) -> np.ndarray:
    """Evaluate the field on the whole grid → ``(rows, cols)`` float array.

    Cost is O(grid points × particles), vectorised over the grid.
    """
    xs, ys = grid_axes(bounds, params.pixel_size)
    field = np.zeros((ys.size, xs.size), dtype=np.float64)
    if field.size == 0 or not particles:
        return field

    gy, gx = np.meshgrid(ys, xs, indexing="ij")
    for p in particles:
        dx = gx - p.x
        dy = gy - p.y
        dist2 = np.maximum(dx * dx + dy * dy, params.min_distance_sq)
        field += (p.radius * p.radius) / dist2
    return field


def threshold_mask(
    bounds: Bounds,
    particles: Sequence[Particle],
    params: LavaParams = DEFAULT_PARAMS,
) -> np.ndarray:
    """Boolean ``(rows, cols)`` mask of grid points strictly above threshold."""
    return influence_field(bounds, particles, params) > params.threshold


# ---------------------------------------------------------------------------
# Painting
# ---------------------------------------------------------------------------

def paint_field(
    surface,
    bounds: Bounds,
    particles: Sequence[Particle],
    color: RGBA,
    params: LavaParams = DEFAULT_PARAMS,
) -> int:
    """Paint the lava mask onto *surface*.  Returns the number of blocks."""
    if bounds.is_empty or not particles:
        return 0

    xs, ys = grid_axes(bounds, params.pixel_size)
    mask = threshold_mask(bounds, particles, params)
    size = params.pixel_size
    rows, cols = np.nonzero(mask)
    for r, c in zip(rows.tolist(), cols.tolist()):
        surface.fill_rect(xs[c], ys[r], size, size, color)
    return len(rows)


def paint_instructions(
    surface,
    bounds: Bounds,
    lines: Sequence[str] = PLACEMENT_INSTRUCTIONS,
) -> None:
    """Placement overlay: translucent backdrop plus shadowed help text."""
    if bounds.is_empty:
        return
    surface.fill_rect(bounds.left, bounds.top, bounds.width, bounds.height,
                      PLACEMENT_BACKDROP)
    text = "\n".join(lines)
    surface.draw_text(bounds.left + 11, bounds.top + 11, text, TEXT_SHADOW)
    surface.draw_text(bounds.left + 10, bounds.top + 10, text, TEXT_COLOR)


# ---------------------------------------------------------------------------
# Headless surface
# ---------------------------------------------------------------------------

class ImageSurface:
    """Numpy-backed RGBA surface.

    ``fill_rect`` overwrites pixels (no alpha compositing); ``draw_text``
    cannot rasterize glyphs, so calls are recorded in ``texts``.
    """

    def __init__(self, width: int, height: int, background: RGBA = (0, 0, 0, 0)) -> None:
        self.pixels = np.zeros((max(0, height), max(0, width), 4), dtype=np.uint8)
        self.pixels[...] = background
        self.texts: List[Tuple[float, float, str, RGBA]] = []

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    def clear(self, background: RGBA = (0, 0, 0, 0)) -> None:
        self.pixels[...] = background
        self.texts.clear()

    def fill_rect(self, x: float, y: float, w: float, h: float, rgba: RGBA) -> None:
        x0 = max(0, int(math.floor(x)))
        y0 = max(0, int(math.floor(y)))
        x1 = min(self.width, int(math.floor(x + w)))
        y1 = min(self.height, int(math.floor(y + h)))
        if x1 <= x0 or y1 <= y0:
            return
        self.pixels[y0:y1, x0:x1] = rgba

    def draw_text(self, x: float, y: float, text: str, rgba: RGBA) -> None:
        self.texts.append((x, y, text, rgba))

    def coverage(self) -> int:
        """Number of non-transparent pixels."""
        return int(np.count_nonzero(self.pixels[..., 3]))


def render_frame(
    bounds: Bounds,
    particles: Sequence[Particle],
    color: RGBA,
    params: LavaParams = DEFAULT_PARAMS,
) -> np.ndarray:
    """Render one frame → ``(height, width, 4)`` uint8 RGBA array.

    The image spans ``(0, 0)`` to ``(bounds.right, bounds.bottom)``.
    """
    width = max(0, int(math.ceil(bounds.right)))
    height = max(0, int(math.ceil(bounds.bottom)))
    surface = ImageSurface(width, height)
    paint_field(surface, bounds, particles, color, params)
    return surface.pixels
