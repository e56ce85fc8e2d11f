"""
Overlay window — hosts the mode controller on screen.

A frameless, always-on-top tool window.  In placement mode it is a
translucent crimson box that can be dragged, nudged and resized from the
keyboard; ENTER saves the geometry and starts the lamp.  In animation
mode it becomes click-through and a ~30 fps QTimer drives the simulation.
"""

from __future__ import annotations

import logging
from typing import Optional

from PyQt5.QtCore import QPoint, QRectF, QTimer, Qt, pyqtSignal
from PyQt5.QtGui import QColor, QFont, QPainter
from PyQt5.QtWidgets import QWidget

from .config import ConfigStore, LampConfig, initial_color
from .engine import Bounds
from .modes import ModeController, TickGate
from .palettes import RGBA

logger = logging.getLogger(__name__)

PLACEMENT_SIZE = (300, 48)

_ARROWS = {
    Qt.Key_Left: (-1, 0),
    Qt.Key_Right: (1, 0),
    Qt.Key_Up: (0, -1),
    Qt.Key_Down: (0, 1),
}


class QtSurface:
    """Adapts a ``QPainter`` to the renderer's surface contract."""

    def __init__(self, painter: QPainter) -> None:
        self._painter = painter
        self._font = QFont("Arial", 8, QFont.Bold)

    def fill_rect(self, x: float, y: float, w: float, h: float, rgba: RGBA) -> None:
        self._painter.fillRect(QRectF(x, y, w, h), QColor(*rgba))

    def draw_text(self, x: float, y: float, text: str, rgba: RGBA) -> None:
        self._painter.setPen(QColor(*rgba))
        self._painter.setFont(self._font)
        self._painter.drawText(
            QRectF(x, y, 4096, 4096), int(Qt.AlignLeft | Qt.AlignTop), text,
        )


class LavaOverlay(QWidget):
    """Window host for the lava lamp.

    Signals:
        frame_ready():      a tick produced a new frame
        mode_changed(str):  "placement" or "animation"
    """

    frame_ready = pyqtSignal()
    mode_changed = pyqtSignal(str)

    def __init__(
        self,
        controller: ModeController,
        store: ConfigStore,
        color_argb: int = 0,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.controller = controller
        self.store = store
        self._color_argb = color_argb
        self._drag_offset: Optional[QPoint] = None
        self._gate = TickGate()
        self._keep_on_top = True

        self.setAttribute(Qt.WA_TranslucentBackground)
        self.setFocusPolicy(Qt.StrongFocus)

        self._timer = QTimer(self)
        self._timer.setInterval(controller.params.tick_interval_ms)
        self._timer.timeout.connect(self._tick)

        self.frame_ready.connect(self._raise_if_on_top)

    # ── properties ────────────────────────────────────────────────────────

    @property
    def color_argb(self) -> int:
        return self.controller.color_argb if self.controller.is_animating else self._color_argb

    def client_bounds(self) -> Bounds:
        return Bounds.from_size(self.width(), self.height())

    # ── mode commands ─────────────────────────────────────────────────────

    def start(self, config: Optional[LampConfig]) -> None:
        """Bootstrap from a saved record (None → placement)."""
        if config is not None and config.is_valid:
            self.setGeometry(config.x, config.y, config.width, config.height)
        else:
            self.resize(*PLACEMENT_SIZE)
        if not self._color_argb:
            self._color_argb = initial_color(config)
        if config is not None:
            config = config.with_color(self._color_argb)
        self.controller.bootstrap(config)
        self._sync_mode()

    def commit_placement(self) -> None:
        """Save the current geometry and start animating."""
        config = LampConfig(
            x=self.x(), y=self.y(),
            width=self.width(), height=self.height(),
            color_argb=self._color_argb or initial_color(None),
        )
        try:
            self.store.save(config)
        except OSError as e:
            logger.error("Could not save config to %s: %s", self.store.path, e)
        self.controller.commit(config.bounds, config.color_argb)
        self._sync_mode()

    def reposition(self) -> None:
        self._color_argb = self.controller.color_argb
        self.controller.reposition()
        self.resize(*PLACEMENT_SIZE)
        self._sync_mode()

    def apply_color(self, color_argb: int) -> None:
        self._color_argb = color_argb
        self.controller.reload_color(color_argb)
        self.update()

    def pause(self) -> None:
        """Stop ticking and stop forcing the window on top."""
        self._keep_on_top = False
        self._timer.stop()

    def resume(self) -> None:
        self._keep_on_top = True
        if self.controller.ticking:
            self._timer.start()

    def _sync_mode(self) -> None:
        animating = self.controller.is_animating
        flags = Qt.FramelessWindowHint | Qt.WindowStaysOnTopHint | Qt.Tool
        if animating:
            flags |= Qt.WindowTransparentForInput
        self.setWindowFlags(flags)
        self.show()

        self._gate.painted()
        if animating:
            self._timer.start()
        else:
            self._timer.stop()
            self.activateWindow()
            self.setFocus()
        self.update()
        self.mode_changed.emit(self.controller.mode.value)

    # ── animation loop ────────────────────────────────────────────────────

    def _tick(self) -> None:
        if self._gate.tick(self.controller, self.client_bounds()):
            self.update()
            self.frame_ready.emit()

    def _raise_if_on_top(self) -> None:
        if self._keep_on_top:
            self.raise_()

    # ── painting ──────────────────────────────────────────────────────────

    def paintEvent(self, event):
        painter = QPainter(self)
        try:
            # Animation paints for the bounds it last ticked with
            bounds = None if self.controller.is_animating else self.client_bounds()
            self.controller.render(QtSurface(painter), bounds)
        finally:
            painter.end()
            self._gate.painted()

    # ── placement input ───────────────────────────────────────────────────

    def mousePressEvent(self, event):
        if not self.controller.is_animating and event.button() == Qt.LeftButton:
            self._drag_offset = event.globalPos() - self.frameGeometry().topLeft()

    def mouseMoveEvent(self, event):
        if self._drag_offset is None:
            return
        self.move(event.globalPos() - self._drag_offset)

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.LeftButton:
            self._drag_offset = None

    def keyPressEvent(self, event):
        if self.controller.is_animating:
            super().keyPressEvent(event)
            return

        key = event.key()
        if key in (Qt.Key_Return, Qt.Key_Enter):
            self.commit_placement()
            return
        if key not in _ARROWS:
            super().keyPressEvent(event)
            return

        dx, dy = _ARROWS[key]
        if event.modifiers() & Qt.ShiftModifier:
            self.resize(max(1, self.width() + dx), max(1, self.height() + dy))
        else:
            self.move(self.x() + dx, self.y() + dy)
