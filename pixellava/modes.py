"""
Placement / Animation state machine.

Exactly one mode is live.  Placement shows instructions and runs no
simulation; Animation owns a particle system and paints the metaball
field.  Leaving Animation always discards the population: there is no
paused-with-particles state.

The controller never touches the window system.  Hosts drive it with
``on_tick`` / ``render`` and issue ``commit`` / ``reposition`` commands;
``on_tick`` returning True is the "frame dirty" signal a host can hang
OS-level work on.
"""

from __future__ import annotations

import enum
import logging
from typing import Optional, Tuple

import numpy as np

from .config import LampConfig
from .engine import DEFAULT_PARAMS, Bounds, LavaParams, Particle, ParticleSystem
from .palettes import RGBA, argb_to_rgba, resolve_color
from .renderer import paint_field, paint_instructions

logger = logging.getLogger(__name__)


class Mode(enum.Enum):
    PLACEMENT = "placement"
    ANIMATION = "animation"


class ModeController:
    """Owns which update/render path runs.

    Parameters:
        params: Tuning for simulation and renderer (or defaults).
        rng:    Shared generator; created from *seed* when omitted.
        seed:   RNG seed for reproducibility (None = random).
    """

    def __init__(
        self,
        params: Optional[LavaParams] = None,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ) -> None:
        self.params = (params or DEFAULT_PARAMS).validate()
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self._mode = Mode.PLACEMENT
        self._system: Optional[ParticleSystem] = None
        self._bounds: Optional[Bounds] = None
        self._color_argb = resolve_color(0)
        self._dirty = False

    # ── properties ────────────────────────────────────────────────────────

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def is_animating(self) -> bool:
        return self._mode is Mode.ANIMATION

    @property
    def ticking(self) -> bool:
        """Whether the host should keep its tick source running."""
        return self.is_animating

    @property
    def color_argb(self) -> int:
        return self._color_argb

    @property
    def color(self) -> RGBA:
        return argb_to_rgba(self._color_argb)

    @property
    def bounds(self) -> Optional[Bounds]:
        return self._bounds

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def particle_count(self) -> int:
        return len(self._system) if self._system is not None else 0

    @property
    def particles(self) -> Tuple[Particle, ...]:
        if self._system is None:
            return ()
        return tuple(self._system.particles)

    # ── transitions ───────────────────────────────────────────────────────

    def bootstrap(self, config: Optional[LampConfig]) -> Mode:
        """Pick the initial mode from a previously saved record."""
        if config is not None and config.is_valid:
            self.commit(config.bounds, config.color_argb)
        else:
            if config is not None:
                logger.warning("Saved config has no usable size: %s", config)
            self._enter_placement()
        return self._mode

    def commit(self, bounds: Bounds, color_argb: int = 0) -> Mode:
        """Enter Animation with *bounds* and *color_argb*.

        Already animating: re-spawn for the new bounds, still one
        simulation.  Unusable bounds route to Placement instead.
        """
        if bounds.is_empty:
            logger.warning("Commit with empty bounds %s; staying in placement", bounds)
            self._enter_placement()
            return self._mode

        if self._system is None:
            self._system = ParticleSystem(self.params, self.rng)
        was = self._mode
        self._mode = Mode.ANIMATION
        self._bounds = bounds
        self._color_argb = resolve_color(color_argb)
        self._system.spawn(bounds)
        self._dirty = True
        if was is Mode.ANIMATION:
            logger.info("Animation re-committed (%d particles)", len(self._system))
        else:
            logger.info("Placement -> Animation (%d particles)", len(self._system))
        return self._mode

    def reposition(self) -> Mode:
        """Leave Animation for Placement.  No-op when already placing."""
        if self._mode is Mode.PLACEMENT:
            return self._mode
        logger.info("Animation -> Placement")
        self._enter_placement()
        return self._mode

    def reload_color(self, color_argb: int) -> None:
        """Re-run the colour part of mode entry without a transition."""
        self._color_argb = resolve_color(color_argb)
        self._dirty = True
        logger.debug("Colour reloaded: %#010x", self._color_argb)

    def _enter_placement(self) -> None:
        self._mode = Mode.PLACEMENT
        self._system = None
        self._bounds = None
        self._dirty = True

    # ── tick / render ─────────────────────────────────────────────────────

    def on_tick(self, bounds: Bounds) -> bool:
        """Run one update pass.  Returns True when a repaint is due."""
        if self._mode is not Mode.ANIMATION or self._system is None:
            return False
        if bounds.is_empty:
            logger.debug("Tick skipped: empty bounds %s", bounds)
            return False
        if self._system.needs_respawn(bounds):
            logger.debug("Bounds changed to %gx%g; respawning", bounds.width, bounds.height)
            self._system.spawn(bounds)
        self._bounds = bounds
        self._system.update_all(bounds)
        self._dirty = True
        return True

    def render(self, surface, bounds: Optional[Bounds] = None) -> None:
        """Paint the current mode onto *surface*.

        *bounds* defaults to the last ticked (or committed) bounds; the
        placement overlay needs it passed in since nothing ticks there.
        """
        self._dirty = False
        if self._mode is Mode.ANIMATION:
            target = self._bounds if bounds is None else bounds
            if target is None or self._system is None:
                return
            paint_field(surface, target, self._system.particles, self.color, self.params)
        elif bounds is not None:
            paint_instructions(surface, bounds)


class TickGate:
    """Keeps ticks and paints strictly alternating.

    A tick is refused while the frame from the previous tick has not been
    painted, so an update never runs between a tick and its render.
    """

    def __init__(self) -> None:
        self._pending = False

    @property
    def pending(self) -> bool:
        return self._pending

    def tick(self, controller: ModeController, bounds: Bounds) -> bool:
        """Run ``controller.on_tick`` unless a paint is outstanding."""
        if self._pending:
            logger.debug("Tick skipped: repaint pending")
            return False
        if controller.on_tick(bounds):
            self._pending = True
            return True
        return False

    def painted(self) -> None:
        self._pending = False
