"""
Pixel Lava
==========

An ambient lava-lamp overlay drawn as chunky pixel-art blobs.

A handful of particles drift in a convection loop:

  - The bottom quarter is "hot" and pushes particles up
  - The top quarter is "cold" and pushes them back down
  - Random lateral wander, per-tick drag and speed caps keep it calm
  - Walls bounce sideways; top and bottom wrap around

Each frame the metaball field Σ(rᵢ² / dᵢ²) is sampled every 2 px and
thresholded into solid 2×2 blocks, with no anti-aliasing.

The lamp has two modes: *placement* (drag / resize the window, ENTER to
save) and *animation* (click-through overlay controlled from the tray).
"""

__version__ = "1.0.0"
__author__ = "Pixel Lava"
