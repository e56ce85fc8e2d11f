#!/usr/bin/env python3
"""
Pixel Lava — quick launcher.

Usage:
    python run_pixellava.py [options]

Run ``python run_pixellava.py --help`` for full options.
"""

from pixellava.app import main

if __name__ == "__main__":
    main()
