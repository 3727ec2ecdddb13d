"""
Art Que sticker post-processing.

Turns a raw generated artwork into a centered, white-bordered sticker on a
fixed transparent canvas.
"""

__version__ = "1.0.0"
