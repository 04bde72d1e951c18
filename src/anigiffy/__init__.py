"""anigiffy - turn sorted still images into animated GIFs."""

__version__: str = "0.1.0"

# Public re-exports for convenience ---------------------------------------------------

from .assembler import Animation, assemble, serialize, write_animation
from .config import AnimationConfig, CropRect, FlipMode, Rotation
from .error_handling import (
    AnigiffyError,
    ConfigurationError,
    DecodeError,
    EncodingError,
    FrameError,
    GeometryError,
    QuantizationError,
)
from .frame_processor import apply_geometry, process_image
from .pipeline import PipelineResult, build_animation, run_pipeline
from .quantize import QuantizedFrame, quantize_frame
from .sources import decode_image, discover_sources

__all__ = [
    "AnigiffyError",
    "Animation",
    "AnimationConfig",
    "ConfigurationError",
    "CropRect",
    "DecodeError",
    "EncodingError",
    "FlipMode",
    "FrameError",
    "GeometryError",
    "PipelineResult",
    "QuantizationError",
    "QuantizedFrame",
    "Rotation",
    "apply_geometry",
    "assemble",
    "build_animation",
    "decode_image",
    "discover_sources",
    "process_image",
    "quantize_frame",
    "run_pipeline",
    "serialize",
    "write_animation",
]
