"""
Sticker Post-Processing Pipeline
Turns a (background-free) artwork into a centred, white-bordered sticker.

Advanced path:
    1. removeStrayPixels     – keep the largest component + its bbox
    2. resizeAndCenter       – crop, cap the long edge, centre on the canvas
    3. createSilhouetteMask  – alpha mask + closing
    4. addWhiteBorder        – dilated white ring under the artwork

Simple path: shrink to fit 2048x2048 (never enlarge) and re-encode.
"""

import dataclasses
import logging

from ..models.pipeline_parameters import PipelineOptions, PipelineParameters
from ..models.processing_result import ProcessingResult
from ..models.raster_image import RasterImage
from ..repositories.image_repository import ImageRepository
from ..services.background_service import BackgroundService
from ..services.border_service import BorderService
from ..services.cleanup_service import CleanupService
from ..services.compositing_service import CompositingService

logger = logging.getLogger(__name__)

SIMPLE_MAX_SIZE = 2048
ADVANCED_STEPS = ["removeStrayPixels", "resizeAndCenter", "createSilhouetteMask", "addWhiteBorder"]


def _advanced(
    image: RasterImage,
    params: PipelineParameters,
    cleanup_service: CleanupService,
    compositing_service: CompositingService,
    border_service: BorderService,
) -> RasterImage:
    logger.info("🎨 Using advanced sticker processing pipeline")
    logger.info(f"   Image dimensions: {image.width} x {image.height}")

    logger.info("🔧 Step 1: Remove stray pixels...")
    cleaned = cleanup_service.remove_stray_pixels(image, params.alpha_threshold)

    logger.info("🔧 Step 2: Resize & center...")
    centered = compositing_service.resize_and_center(cleaned, params)

    logger.info("🔧 Step 3+4: Silhouette mask & white border...")
    bordered = border_service.add_white_border(centered, params)

    logger.info("✅ Advanced processing complete")
    return bordered


def _simple(image: RasterImage, compositing_service: CompositingService) -> RasterImage:
    logger.info("🎨 Using simple processing (resize & optimize)")
    out = compositing_service.fit_within(image, SIMPLE_MAX_SIZE)
    logger.info("✅ Simple processing complete")
    return out


def process(
    image: RasterImage,
    options: PipelineOptions = PipelineOptions(),
    params: PipelineParameters = PipelineParameters(),
    *,
    background_service: BackgroundService = None,
    cleanup_service: CleanupService = CleanupService(),
    compositing_service: CompositingService = CompositingService(),
    border_service: BorderService = BorderService(),
) -> RasterImage:
    """
    Run the post-processing pipeline on an in-memory RGBA image.

    Args:
        image: input artwork (not modified).
        options: which stages run.
        params: sizing / threshold knobs for the advanced path.
        background_service: remote background remover, only used when
            options.skip_background_removal is False.

    Returns:
        RasterImage: a new image; canvas_size x canvas_size on the advanced path.

    Raises:
        ExternalServiceError: background removal failed.
        MalformedInputError: the background-removed bytes could not be decoded.
    """
    logger.info("🎨 Starting post-processing")
    logger.info(f"   Skip BG Removal: {options.skip_background_removal}")
    logger.info(f"   Advanced Processing: {options.use_advanced_processing}")

    working = image
    if not options.skip_background_removal:
        background_service = background_service or BackgroundService()
        working = background_service.remove_background(working)

    if options.use_advanced_processing:
        return _advanced(working, params, cleanup_service, compositing_service, border_service)
    return _simple(working, compositing_service)


def process_image_buffer(
    image_bytes: bytes,
    options: PipelineOptions = PipelineOptions(),
    params: PipelineParameters = PipelineParameters(),
    *,
    background_service: BackgroundService = None,
    image_repository: ImageRepository = ImageRepository(),
) -> ProcessingResult:
    """
    Bytes in, PNG bytes out. Background removal (if requested) is applied to
    the original encoded bytes before decoding.
    """
    working_bytes = image_bytes
    if not options.skip_background_removal:
        background_service = background_service or BackgroundService()
        working_bytes = background_service.remove_background_bytes(image_bytes)

    logger.info(f"📥 Working with image buffer: {len(working_bytes)} bytes")
    image = image_repository.decode(working_bytes)

    processed = process(image, dataclasses.replace(options, skip_background_removal=True), params)
    png = image_repository.encode_png(processed)

    logger.info(f"   Original size: {len(image_bytes)} bytes")
    logger.info(f"   Processed size: {len(png)} bytes")

    return ProcessingResult(
        png=png,
        original_size=len(image_bytes),
        background_removed=not options.skip_background_removal,
        advanced_processing=options.use_advanced_processing,
        processing_steps=list(ADVANCED_STEPS) if options.use_advanced_processing else [],
    )
