"""
Settings dialog — pick the lava colour.
"""

from __future__ import annotations

import logging
from typing import Optional

from PyQt5.QtGui import QColor
from PyQt5.QtWidgets import (
    QColorDialog,
    QComboBox,
    QDialog,
    QDialogButtonBox,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from .palettes import (
    PRESETS,
    argb_to_hex,
    list_presets,
    pack_argb,
    resolve_color,
    unpack_argb,
)

logger = logging.getLogger(__name__)

_CUSTOM = "custom"


class SettingsDialog(QDialog):
    """Modal colour picker.  Read ``selected_argb`` after ``exec_()``."""

    def __init__(self, color_argb: int, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Pixel Lava Settings")
        self._argb = resolve_color(color_argb)

        layout = QVBoxLayout(self)
        group = QGroupBox("Lava Colour")
        g = QVBoxLayout(group)

        self._combo = QComboBox()
        for key in list_presets():
            self._combo.addItem(PRESETS[key].name, key)
        self._combo.addItem("Custom", _CUSTOM)
        g.addWidget(self._combo)

        row = QHBoxLayout()
        row.addWidget(QLabel("Colour:"))
        self._swatch = QWidget()
        self._swatch.setFixedSize(20, 20)
        row.addWidget(self._swatch)
        self._hex = QLabel()
        row.addWidget(self._hex)
        pick = QPushButton("Pick…")
        pick.setFixedWidth(50)
        pick.clicked.connect(self._pick_color)
        row.addWidget(pick)
        row.addStretch()
        g.addLayout(row)
        layout.addWidget(group)

        buttons = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

        self._select_matching_preset()
        self._combo.currentIndexChanged.connect(self._on_preset_changed)
        self._update_swatch()

    @property
    def selected_argb(self) -> int:
        return self._argb

    # ── slots ─────────────────────────────────────────────────────────────

    def _select_matching_preset(self) -> None:
        for i in range(self._combo.count()):
            key = self._combo.itemData(i)
            if key != _CUSTOM and PRESETS[key].argb == self._argb:
                self._combo.setCurrentIndex(i)
                return
        self._combo.setCurrentIndex(self._combo.findData(_CUSTOM))

    def _on_preset_changed(self, idx: int) -> None:
        key = self._combo.itemData(idx)
        if key == _CUSTOM:
            return
        self._argb = PRESETS[key].argb
        self._update_swatch()

    def _pick_color(self) -> None:
        a, r, g, b = unpack_argb(self._argb)
        color = QColorDialog.getColor(QColor(r, g, b, a), self, "Pick Lava Colour")
        if color.isValid():
            self._argb = pack_argb(color.alpha(), color.red(), color.green(), color.blue())
            logger.debug("Custom colour picked: %s", argb_to_hex(self._argb))
            self._combo.blockSignals(True)
            self._select_matching_preset()
            self._combo.blockSignals(False)
            self._update_swatch()

    def _update_swatch(self) -> None:
        _, r, g, b = unpack_argb(self._argb)
        self._swatch.setStyleSheet(
            f"background: rgb({r},{g},{b}); "
            "border-radius: 10px; border: 1px solid #555;"
        )
        self._hex.setText(argb_to_hex(self._argb))
