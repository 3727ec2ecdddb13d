from .sticker_postprocessor import process, process_image_buffer

__all__ = ["process", "process_image_buffer"]
