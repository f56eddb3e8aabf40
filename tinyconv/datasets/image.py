"""Load an image file as a normalized single-channel input tensor."""
from pathlib import Path
from typing import Union

import numpy as np
import torch
import torchvision.transforms.functional as TF
from PIL import Image
from torchvision.transforms import InterpolationMode

from tinyconv.utils.shapes import ShapeMismatchError


def load_grayscale(path: Union[str, Path], img_size: int = 28) -> torch.Tensor:
    """Decode an image, convert it to grayscale and resize it.

    Resizing samples the nearest source pixel, so every output pixel is an
    unblended source intensity. Decode errors (missing file, unknown format)
    propagate unchanged.

    Args:
        path: Image file path (any format PIL can decode)
        img_size: Side length of the square output

    Returns:
        Tensor of shape (1, img_size, img_size) with values in [0, 1]
    """
    if img_size <= 0:
        raise ValueError(f"img_size must be positive, got {img_size}")
    with Image.open(path) as img:
        img = img.convert("L")
        # NEAREST picks the pixel under each output pixel centre, not floor(x * W / size)
        img = TF.resize(img, [img_size, img_size], interpolation=InterpolationMode.NEAREST)
        # to_tensor scales uint8 intensities to [0, 1]
        return TF.to_tensor(img)


def grid_to_tensor(grid) -> torch.Tensor:
    """Wrap a 2-D grid of intensities in [0, 1] as a (1, H, W) input tensor."""
    arr = np.asarray(grid, dtype=np.float32)
    if arr.ndim != 2 or arr.size == 0:
        raise ShapeMismatchError(f"expected a non-empty 2-D grid, got shape {arr.shape}")
    if arr.min() < 0.0 or arr.max() > 1.0:
        raise ValueError(f"intensities must lie in [0, 1], got range [{arr.min()}, {arr.max()}]")
    return torch.from_numpy(arr).unsqueeze(0)


__all__ = ["load_grayscale", "grid_to_tensor"]
