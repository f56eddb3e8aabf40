"""Input loading utilities."""
from tinyconv.datasets.image import grid_to_tensor, load_grayscale

__all__ = [
    "load_grayscale",
    "grid_to_tensor",
]
