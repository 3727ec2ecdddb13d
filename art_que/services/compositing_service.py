import math
from typing import Optional, Tuple
import numpy as np
from PIL import Image as PILImage

from ..models.pipeline_parameters import PipelineParameters
from ..models.raster_image import RasterImage


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class CompositingService:
    """
    Cropping, resizing and pasting of RGBA images onto fixed canvases.
    Every method returns a new RasterImage.
    """

    WHITE = (255, 255, 255, 255)

    # ─── geometry ─────────────────────────────────────────────────────
    @staticmethod
    def alpha_bounding_box(image: RasterImage, alpha_threshold: int) -> Optional[Tuple[int, int, int, int]]:
        """
        Returns:
            (min_x, min_y, max_x, max_y) inclusive, or None when no pixel has
            alpha above the threshold.
        """
        visible = image.alpha > alpha_threshold
        rows = np.flatnonzero(visible.any(axis=1))
        cols = np.flatnonzero(visible.any(axis=0))
        if rows.size == 0 or cols.size == 0:
            return None
        return int(cols[0]), int(rows[0]), int(cols[-1]), int(rows[-1])

    @staticmethod
    def fit_long_edge(width: int, height: int, max_dimension: int) -> Tuple[int, int]:
        """
        Cap the long axis at max_dimension (never upscale), keep aspect ratio.
        Width drives when strictly wider, height otherwise.
        """
        if width > height:
            new_width = min(max_dimension, width)
            new_height = max(1, _round_half_up(height * new_width / width))
        else:
            new_height = min(max_dimension, height)
            new_width = max(1, _round_half_up(width * new_height / height))
        return new_width, new_height

    @staticmethod
    def fit_inside(width: int, height: int, max_width: int, max_height: int) -> Tuple[int, int]:
        """Shrink to fit inside max_width x max_height; images already inside are untouched."""
        if width <= max_width and height <= max_height:
            return width, height
        scale = min(max_width / width, max_height / height)
        new_width = min(max_width, max(1, _round_half_up(width * scale)))
        new_height = min(max_height, max(1, _round_half_up(height * scale)))
        return new_width, new_height

    # ─── pixel ops ────────────────────────────────────────────────────
    @staticmethod
    def blank_canvas(width: int, height: int = None) -> RasterImage:
        return RasterImage.blank(width, width if height is None else height)

    @staticmethod
    def solid_canvas(width: int, height: int, color: Tuple[int, int, int, int]) -> RasterImage:
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[:, :] = color
        return RasterImage(pixels)

    @staticmethod
    def crop(image: RasterImage, min_x: int, min_y: int, max_x: int, max_y: int) -> RasterImage:
        return RasterImage(image.pixels[min_y:max_y + 1, min_x:max_x + 1].copy())

    @staticmethod
    def resize(image: RasterImage, size: Tuple[int, int]) -> RasterImage:
        """Lanczos resample; returns an untouched copy when the size already matches."""
        if (image.width, image.height) == tuple(size):
            return image.copy()
        pil_img = PILImage.fromarray(np.ascontiguousarray(image.pixels))
        resized = pil_img.resize(tuple(size), PILImage.Resampling.LANCZOS)
        return RasterImage(np.array(resized, dtype=np.uint8))

    @staticmethod
    def paste(canvas: RasterImage, image: RasterImage, left: int, top: int) -> RasterImage:
        """
        Replace canvas pixels with image pixels at (left, top), clipped to the
        canvas. Equivalent to an "over" composite when the canvas is transparent.
        """
        out = canvas.copy()
        x0, y0 = max(0, left), max(0, top)
        x1 = min(canvas.width, left + image.width)
        y1 = min(canvas.height, top + image.height)
        if x0 >= x1 or y0 >= y1:
            return out
        out.pixels[y0:y1, x0:x1] = image.pixels[y0 - top:y1 - top, x0 - left:x1 - left]
        return out

    @staticmethod
    def alpha_over(top: RasterImage, bottom: RasterImage) -> RasterImage:
        """Porter-Duff "over": top composited onto bottom (same size)."""
        if top.pixels.shape != bottom.pixels.shape:
            raise ValueError(f"Cannot composite {top.pixels.shape} over {bottom.pixels.shape}")

        top_f = top.pixels.astype(np.float32) / 255.0
        bottom_f = bottom.pixels.astype(np.float32) / 255.0
        top_a = top_f[:, :, 3:4]
        bottom_a = bottom_f[:, :, 3:4]

        out_a = top_a + bottom_a * (1.0 - top_a)
        premult = top_f[:, :, :3] * top_a + bottom_f[:, :, :3] * bottom_a * (1.0 - top_a)
        out_rgb = premult / np.where(out_a > 0, out_a, 1.0)

        out = np.concatenate([out_rgb, out_a], axis=2) * 255.0
        return RasterImage(np.clip(np.rint(out), 0, 255).astype(np.uint8))

    # ─── pipeline steps ───────────────────────────────────────────────
    def resize_and_center(self, image: RasterImage, params: PipelineParameters) -> RasterImage:
        """
        Crop to the visible bbox, cap the long edge at max_dimension and paste
        the result centred on a transparent canvas_size square.
        """
        canvas = self.blank_canvas(params.canvas_size)

        bbox = self.alpha_bounding_box(image, params.alpha_threshold)
        if bbox is None:
            return canvas

        min_x, min_y, max_x, max_y = bbox
        crop_width = max_x - min_x + 1
        crop_height = max_y - min_y + 1
        if crop_width <= 0 or crop_height <= 0:
            return canvas

        cropped = self.crop(image, min_x, min_y, max_x, max_y)
        resized = self.resize(cropped, self.fit_long_edge(crop_width, crop_height, params.max_dimension))

        paste_x = (params.canvas_size - resized.width) // 2
        paste_y = (params.canvas_size - resized.height) // 2
        return self.paste(canvas, resized, paste_x, paste_y)

    def fit_within(self, image: RasterImage, max_size: int) -> RasterImage:
        size = self.fit_inside(image.width, image.height, max_size, max_size)
        return self.resize(image, size)

    def flatten_onto_white(self, image: RasterImage, canvas_size: int = 1024) -> RasterImage:
        """
        Shrink to fit the canvas (never enlarge), centre it and flatten onto an
        opaque white square.
        """
        resized = self.fit_within(image, canvas_size)
        left = (canvas_size - resized.width) // 2
        top = (canvas_size - resized.height) // 2

        layer = self.paste(self.blank_canvas(canvas_size), resized, left, top)
        background = self.solid_canvas(canvas_size, canvas_size, self.WHITE)
        return self.alpha_over(layer, background)
