from __future__ import annotations

import numpy as np

from art_que.models.raster_image import RasterImage

RED = (255, 0, 0, 255)
WHITE = (255, 255, 255, 255)


def blank(width: int, height: int) -> RasterImage:
    return RasterImage(np.zeros((height, width, 4), dtype=np.uint8))


def fill_rect(image: RasterImage, x0: int, y0: int, x1: int, y1: int, color=RED) -> RasterImage:
    """Paint the inclusive rectangle [x0..x1] x [y0..y1] in place and return the image."""
    image.pixels[y0:y1 + 1, x0:x1 + 1] = color
    return image


def visible_bbox(image: RasterImage, threshold: int = 0):
    ys, xs = np.nonzero(image.alpha > threshold)
    if xs.size == 0:
        return None
    return int(xs.min()), int(ys.min()), int(xs.max()), int(ys.max())


def count_color(image: RasterImage, color) -> int:
    return int(np.all(image.pixels == np.array(color, dtype=np.uint8), axis=2).sum())
