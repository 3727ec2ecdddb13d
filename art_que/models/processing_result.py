from dataclasses import dataclass, field
from typing import List


@dataclass
class ProcessingResult:
    png: bytes                    # final PNG bytes
    original_size: int            # size of the input bytes
    background_removed: bool
    advanced_processing: bool
    processing_steps: List[str] = field(default_factory=list)

    @property
    def processed_size(self) -> int:
        return len(self.png)

    @property
    def compression_ratio(self) -> str:
        if self.original_size == 0:
            return "0.00"
        return f"{1 - self.processed_size / self.original_size:.2f}"

    def to_metadata(self) -> dict:
        metadata = {
            "originalSize": self.original_size,
            "processedSize": self.processed_size,
            "compressionRatio": self.compression_ratio,
            "backgroundRemoved": self.background_removed,
            "advancedProcessing": self.advanced_processing,
        }
        if self.advanced_processing:
            metadata["processingSteps"] = list(self.processing_steps)
        return metadata
