"""
Application entry point — CLI parsing, dependency checks, Qt launch.
"""

from __future__ import annotations

import argparse
import logging
import sys

from . import __version__


def _check_deps() -> list:
    missing = []
    try:
        import numpy  # noqa: F401
    except ImportError:
        missing.append("numpy")
    try:
        import PyQt5  # noqa: F401
    except ImportError:
        missing.append("PyQt5")
    return missing


def _parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="pixellava",
        description="Pixel Lava — pixel-art lava lamp overlay for your desktop.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  %(prog)s                        # resume saved lamp, or place a new one\n"
            "  %(prog)s --place                # reposition before starting\n"
            "  %(prog)s --color blue           # override the saved colour\n"
            "  %(prog)s --color '#FF40C0FF'    # any #RRGGBB / #AARRGGBB\n"
            "  %(prog)s --list-colors          # show colour presets\n"
            "  %(prog)s -v                     # verbose logging\n"
        ),
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--config", type=str, default=None,
                   help="Config file (default: lavalamp.config.json)")
    p.add_argument("--color", type=str, default=None, help="Lava colour name or hex")
    p.add_argument("--place", action="store_true", help="Start in placement mode")
    p.add_argument("--seed", type=int, default=None, help="RNG seed")
    p.add_argument("--list-colors", action="store_true", help="List colour presets and exit")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return p.parse_args(argv)


def main(argv=None) -> None:
    args = _parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    logger = logging.getLogger("pixellava")

    # List colours
    if args.list_colors:
        from .palettes import PRESETS, list_presets
        print("Available colours:")
        for key in list_presets():
            c = PRESETS[key]
            print(f"  {key:10s}  {c.name:14s}  {c.hex}")
        sys.exit(0)

    # Dependency check
    missing = _check_deps()
    if missing:
        print(f"ERROR: Missing packages: {', '.join(missing)}\n"
              f"Install: pip install {' '.join(missing)}", file=sys.stderr)
        sys.exit(1)

    from .config import DEFAULT_CONFIG_FILE, ConfigError, ConfigStore, initial_color
    from .palettes import parse_color

    override = 0
    if args.color:
        try:
            override = parse_color(args.color)
        except ValueError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            sys.exit(1)

    store = ConfigStore(args.config or DEFAULT_CONFIG_FILE)
    try:
        config = store.load()
    except ConfigError as e:
        logger.warning("Ignoring saved config: %s", e)
        config = None

    color = override or initial_color(config)
    if args.place:
        config = None

    # Launch
    logger.info("Starting Pixel Lava v%s", __version__)

    from PyQt5.QtWidgets import QApplication
    from .canvas import LavaOverlay
    from .modes import ModeController
    from .tray import LavaTray

    app = QApplication(sys.argv if argv is None else ["pixellava", *argv])
    app.setApplicationName("Pixel Lava")
    app.setApplicationVersion(__version__)
    app.setQuitOnLastWindowClosed(False)

    app.setStyleSheet("""
        QDialog, QMenu {
            background: #1a1816;
            color: #c8b8a0;
        }
        QGroupBox {
            font-weight: bold;
            color: #c8a870;
            border: 1px solid #3a3025;
            border-radius: 6px;
            margin-top: 8px;
            padding-top: 14px;
        }
        QPushButton, QComboBox {
            background: #2a2218;
            border: 1px solid #4a4035;
            border-radius: 4px;
            padding: 4px 8px;
            color: #c8b8a0;
        }
        QMenu::item:selected {
            background: #5a4a35;
        }
    """)

    controller = ModeController(seed=args.seed)
    overlay = LavaOverlay(controller, store, color_argb=color)
    tray = LavaTray(overlay, store)
    overlay.start(config)
    logger.info("Mode: %s", controller.mode.value)

    exit_code = app.exec_()
    tray.hide()
    sys.exit(exit_code)
