"""Utility modules for tinyconv."""
from .seed import resolve_seed, make_generator
from .config import load_config, apply_overrides
from .shapes import (
    PipelineError,
    ShapeMismatchError,
    InvalidConfigError,
    Shape3D,
    conv_output_size,
    pad2d,
)

__all__ = [
    "resolve_seed",
    "make_generator",
    "load_config",
    "apply_overrides",
    "PipelineError",
    "ShapeMismatchError",
    "InvalidConfigError",
    "Shape3D",
    "conv_output_size",
    "pad2d",
]
