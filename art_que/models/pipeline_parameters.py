from dataclasses import dataclass


@dataclass(frozen=True)
class PipelineParameters:
    """Sizing / threshold knobs for one advanced-pipeline run."""
    alpha_threshold: int = 10   # alpha must be strictly above this to count as visible
    max_dimension: int = 940    # long edge cap after cropping (never upscales)
    canvas_size: int = 1024     # square output frame
    border_px: int = 14         # white ring width

    def __post_init__(self):
        if not 0 <= self.alpha_threshold <= 255:
            raise ValueError(f"alpha_threshold must be in [0, 255], got {self.alpha_threshold}")
        if self.max_dimension <= 0:
            raise ValueError(f"max_dimension must be positive, got {self.max_dimension}")
        if self.canvas_size <= 0:
            raise ValueError(f"canvas_size must be positive, got {self.canvas_size}")
        if self.border_px < 0:
            raise ValueError(f"border_px must be >= 0, got {self.border_px}")


@dataclass(frozen=True)
class PipelineOptions:
    """Which stages run. Chosen by the caller (API layer / CLI)."""
    skip_background_removal: bool = True
    use_advanced_processing: bool = True
