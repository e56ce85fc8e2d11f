"""
System tray icon — the only way to control the lamp once it is
click-through.
"""

from __future__ import annotations

import logging
from typing import Optional

from PyQt5.QtCore import QObject, Qt
from PyQt5.QtGui import QColor, QIcon, QPainter, QPixmap
from PyQt5.QtWidgets import QAction, QApplication, QDialog, QMenu, QSystemTrayIcon

from .canvas import LavaOverlay
from .config import ConfigStore
from .palettes import argb_to_rgba
from .settings import SettingsDialog

logger = logging.getLogger(__name__)


def swatch_icon(color_argb: int, size: int = 32) -> QIcon:
    """Round icon filled with the lava colour."""
    pix = QPixmap(size, size)
    pix.fill(Qt.transparent)
    painter = QPainter(pix)
    painter.setRenderHint(QPainter.Antialiasing)
    painter.setPen(Qt.NoPen)
    painter.setBrush(QColor(*argb_to_rgba(color_argb)))
    painter.drawEllipse(2, 2, size - 4, size - 4)
    painter.end()
    return QIcon(pix)


class LavaTray(QSystemTrayIcon):
    """Tray icon with Reposition / Settings / Quit.

    Shown only while the lamp is animating.  The overlay is paused while
    the menu is open so the always-on-top raise cannot close it.
    """

    def __init__(
        self,
        overlay: LavaOverlay,
        store: ConfigStore,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.overlay = overlay
        self.store = store
        self.setToolTip("Pixel Lava")
        self.set_color(overlay.color_argb)

        self._menu = QMenu()
        self._build_menu()
        self.setContextMenu(self._menu)

        overlay.mode_changed.connect(self._on_mode_changed)

    def _build_menu(self) -> None:
        menu = self._menu
        repos_act = QAction("&Reposition lamp", menu)
        repos_act.triggered.connect(self.overlay.reposition)
        menu.addAction(repos_act)

        settings_act = QAction("&Settings…", menu)
        settings_act.triggered.connect(self.open_settings)
        menu.addAction(settings_act)

        menu.addSeparator()
        quit_act = QAction("&Quit", menu)
        quit_act.triggered.connect(self._quit)
        menu.addAction(quit_act)

        menu.aboutToShow.connect(self.overlay.pause)
        menu.aboutToHide.connect(self.overlay.resume)

    def set_color(self, color_argb: int) -> None:
        self.setIcon(swatch_icon(color_argb))

    def open_settings(self) -> None:
        self.overlay.pause()
        try:
            dialog = SettingsDialog(self.overlay.color_argb)
            if dialog.exec_() == QDialog.Accepted:
                config = self.store.update_color(dialog.selected_argb)
                self.overlay.apply_color(config.color_argb)
                self.set_color(config.color_argb)
        except OSError as e:
            logger.error("Could not save colour to %s: %s", self.store.path, e)
        finally:
            self.overlay.resume()

    def _on_mode_changed(self, mode: str) -> None:
        self.setVisible(mode == "animation")

    def _quit(self) -> None:
        self.hide()
        QApplication.quit()
