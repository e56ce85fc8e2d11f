"""
Pixel lava physics engine.

Owns the particle population and runs the per-tick convection simulation.
One tick is one implicit unit of time: the timer rate *is* the physics rate,
so nothing here takes a ``dt``.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

import numpy as np

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Tuning parameters
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LavaParams:
    """Immutable tuning shared by the simulation and the renderer.

    Attributes are grouped by category.  Velocities and accelerations are
    in pixels per tick (and pixels per tick²).
    """
    # Speed limits
    max_speed_x: float = 0.5
    max_speed_y: float = 1.0

    # Forces
    acceleration: float = 0.02   # convection push
    drag: float = 0.98           # per-tick velocity multiplier
    wander_force: float = 0.035  # lateral jitter half-range

    # Convection zones (fraction of bounds height, 0=top)
    hot_zone: float = 0.75
    cold_zone: float = 0.25
    random_factor_min: float = 0.8
    random_factor_max: float = 1.3

    # Spawning
    radius_min: float = 5.0
    radius_max: float = 10.0
    spawn_speed_x: float = 0.25
    spawn_speed_y: float = 0.5
    pixels_per_particle: float = 16.0
    min_particles: int = 2
    max_particles: int = 50

    # Rendering
    pixel_size: int = 2
    threshold: float = 3.0
    min_distance_sq: float = 0.001

    # Timing
    tick_interval_ms: int = 33

    def validate(self) -> "LavaParams":
        """Raise ``ValueError`` for a tuning the simulation cannot run."""
        if self.max_speed_x <= 0 or self.max_speed_y <= 0:
            raise ValueError("speed limits must be positive")
        if not 0.0 < self.drag <= 1.0:
            raise ValueError(f"drag must be in (0, 1], got {self.drag}")
        if self.random_factor_min > self.random_factor_max:
            raise ValueError("random_factor_min exceeds random_factor_max")
        if not 0.0 < self.radius_min <= self.radius_max:
            raise ValueError("radius range must be positive and ordered")
        if self.cold_zone > self.hot_zone:
            raise ValueError("cold_zone must lie above hot_zone")
        if self.pixels_per_particle <= 0:
            raise ValueError("pixels_per_particle must be positive")
        if not 0 <= self.min_particles <= self.max_particles:
            raise ValueError("min_particles must not exceed max_particles")
        if self.pixel_size < 1:
            raise ValueError(f"pixel_size must be >= 1, got {self.pixel_size}")
        if self.min_distance_sq <= 0:
            raise ValueError("min_distance_sq must be positive")
        if self.tick_interval_ms < 1:
            raise ValueError("tick_interval_ms must be >= 1")
        return self


DEFAULT_PARAMS = LavaParams()


# ---------------------------------------------------------------------------
# Bounds
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Bounds:
    """Axis-aligned simulation rectangle in surface pixels."""
    left: float = 0.0
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0

    @classmethod
    def from_size(cls, width: float, height: float) -> "Bounds":
        return cls(0, 0, width, height)

    @classmethod
    def from_rect(cls, x: float, y: float, width: float, height: float) -> "Bounds":
        return cls(x, y, x + width, y + height)

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def size(self) -> Tuple[float, float]:
        return (self.width, self.height)

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


# ---------------------------------------------------------------------------
# Particle
# ---------------------------------------------------------------------------

@dataclass
class Particle:
    """A single lava "energy point".

    ``radius`` is the metaball influence radius, not a drawn size.
    """
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    radius: float = 5.0

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    @property
    def velocity(self) -> Tuple[float, float]:
        return (self.vx, self.vy)

    # ── per-tick update ───────────────────────────────────────────────────

    def update(
        self,
        bounds: Bounds,
        rng: np.random.Generator,
        params: LavaParams = DEFAULT_PARAMS,
    ) -> None:
        """Advance one tick: forces, integration, then boundary handling."""
        if bounds.is_empty:
            return
        self.apply_forces(bounds, rng, params)
        self.integrate()
        self.apply_boundaries(bounds)

    def apply_forces(
        self,
        bounds: Bounds,
        rng: np.random.Generator,
        params: LavaParams = DEFAULT_PARAMS,
    ) -> None:
        """Convection, wander, drag and the velocity clamp."""
        p = params
        relative_y = self.y / bounds.height
        random_factor = rng.uniform(p.random_factor_min, p.random_factor_max)

        # Convection: hot bottom pushes up, cold top pushes down
        if relative_y > p.hot_zone:
            self.vy -= p.acceleration * random_factor
        elif relative_y < p.cold_zone:
            self.vy += p.acceleration * random_factor

        self.vx += rng.uniform(-p.wander_force, p.wander_force)

        self.vx *= p.drag
        self.vy *= p.drag

        self.vx = max(-p.max_speed_x, min(p.max_speed_x, self.vx))
        self.vy = max(-p.max_speed_y, min(p.max_speed_y, self.vy))

    def integrate(self) -> None:
        self.x += self.vx
        self.y += self.vy

    def apply_boundaries(self, bounds: Bounds) -> bool:
        """Bounce on X, wrap on Y.  Returns True if a bounce fired."""
        r = self.radius
        bounced = False

        # The clamp reruns on every tick the particle sits outside, even at
        # the exact edge with a tiny velocity.
        if self.x - r < bounds.left or self.x + r > bounds.right:
            self.vx = -self.vx
            self.x = max(bounds.left + r, min(bounds.right - r, self.x))
            bounced = True

        if self.y > bounds.bottom + r:
            self.y = bounds.top - r
        elif self.y < bounds.top - r:
            self.y = bounds.bottom + r

        return bounced


# ---------------------------------------------------------------------------
# Particle system
# ---------------------------------------------------------------------------

def spawn_count(bounds: Bounds, params: LavaParams = DEFAULT_PARAMS) -> int:
    """Population size for *bounds*: ``clamp(round(width / 16), 2, 50)``."""
    # Rounds half up: 40 px -> 3 particles
    count = int(math.floor(bounds.width / params.pixels_per_particle + 0.5))
    return max(params.min_particles, min(params.max_particles, count))


class ParticleSystem:
    """Owns the particle population and the shared random generator.

    Parameters:
        params: Tuning (or defaults).
        rng:    Generator shared by every spawn and every particle update.
                Injected so callers can seed it; never re-seeded here.
    """

    def __init__(
        self,
        params: Optional[LavaParams] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.params = params or DEFAULT_PARAMS
        self.rng = rng if rng is not None else np.random.default_rng()
        self.particles: List[Particle] = []
        self.spawn_bounds: Optional[Bounds] = None

    def __len__(self) -> int:
        return len(self.particles)

    def __iter__(self) -> Iterator[Particle]:
        return iter(self.particles)

    # ── population management ─────────────────────────────────────────────

    def spawn(self, bounds: Bounds) -> None:
        """Discard the population and build a fresh one sized for *bounds*."""
        self.particles = []
        self.spawn_bounds = bounds
        if bounds.is_empty:
            logger.debug("Spawn skipped: empty bounds %s", bounds)
            return

        p = self.params
        rng = self.rng
        for _ in range(spawn_count(bounds, p)):
            self.particles.append(Particle(
                x=rng.uniform(bounds.left, bounds.right),
                y=rng.uniform(bounds.top, bounds.bottom),
                vx=rng.uniform(-p.spawn_speed_x, p.spawn_speed_x),
                vy=rng.uniform(-p.spawn_speed_y, p.spawn_speed_y),
                radius=rng.uniform(p.radius_min, p.radius_max),
            ))
        logger.info(
            "Spawned %d particles for %gx%g bounds",
            len(self.particles), bounds.width, bounds.height,
        )

    def clear(self) -> None:
        self.particles = []
        self.spawn_bounds = None

    def needs_respawn(self, bounds: Bounds) -> bool:
        """True when *bounds* no longer matches the size spawned for."""
        if self.spawn_bounds is None:
            return True
        return self.spawn_bounds.size != bounds.size

    # ── physics step ──────────────────────────────────────────────────────

    def update_all(self, bounds: Bounds) -> None:
        """Advance every particle one tick.  Particles do not interact."""
        if bounds.is_empty:
            return
        for particle in self.particles:
            particle.update(bounds, self.rng, self.params)
