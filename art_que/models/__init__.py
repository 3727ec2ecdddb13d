from .raster_image import RasterImage
from .region import Region
from .pipeline_parameters import PipelineParameters, PipelineOptions
from .processing_result import ProcessingResult

__all__ = [
    "RasterImage",
    "Region",
    "PipelineParameters",
    "PipelineOptions",
    "ProcessingResult",
]
