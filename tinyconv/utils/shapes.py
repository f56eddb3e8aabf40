"""Shape arithmetic, zero padding and tensor validation shared by all layers."""
from typing import NamedTuple

import torch
import torch.nn.functional as F


class PipelineError(ValueError):
    """Base class for errors raised by the inference pipeline."""


class ShapeMismatchError(PipelineError):
    """A tensor does not have the shape a layer was configured for."""


class InvalidConfigError(PipelineError):
    """A layer was configured with sizes that cannot produce an output."""


class Shape3D(NamedTuple):
    """(channels, height, width) of a feature map."""

    channels: int
    height: int
    width: int

    @property
    def numel(self) -> int:
        return self.channels * self.height * self.width

    def __str__(self):
        return f"{self.channels} channels {self.height}x{self.width}"


def conv_output_size(input_size: int, kernel_size: int, stride: int = 1, padding: int = 0) -> int:
    """Output length of a sliding window along one spatial axis.

    Computes ``floor((input_size + 2 * padding - kernel_size) / stride) + 1``.

    Raises:
        InvalidConfigError: if the kernel or stride is non-positive, the padding
            is negative, or the window does not fit into the padded input.
    """
    if kernel_size <= 0:
        raise InvalidConfigError(f"kernel size must be positive, got {kernel_size}")
    if stride <= 0:
        raise InvalidConfigError(f"stride must be positive, got {stride}")
    if padding < 0:
        raise InvalidConfigError(f"padding must be non-negative, got {padding}")

    padded = input_size + 2 * padding
    if padded < kernel_size:
        raise InvalidConfigError(
            f"window of size {kernel_size} does not fit input of size {input_size} "
            f"with padding {padding}"
        )
    return (padded - kernel_size) // stride + 1


def pad2d(x: torch.Tensor, padding: int) -> torch.Tensor:
    """Surround every channel of ``x`` with ``padding`` rows/columns of zeros.

    Accepts a 2-D grid (H, W) or a multi-channel tensor (C, H, W). Padding of 0
    returns ``x`` itself.
    """
    if padding < 0:
        raise InvalidConfigError(f"padding must be non-negative, got {padding}")
    if x.dim() not in (2, 3):
        raise ShapeMismatchError(f"expected a (H, W) or (C, H, W) tensor, got shape {tuple(x.shape)}")
    if padding == 0:
        return x
    return F.pad(x, (padding, padding, padding, padding), mode="constant", value=0.0)


def check_tensor3d(x, expected_channels: int = None) -> Shape3D:
    """Validate a (C, H, W) feature map and return its shape."""
    if not isinstance(x, torch.Tensor):
        raise ShapeMismatchError(f"expected a (C, H, W) tensor, got {type(x).__name__}")
    if x.dim() != 3:
        raise ShapeMismatchError(f"expected a (C, H, W) tensor, got shape {tuple(x.shape)}")
    if not x.is_floating_point():
        raise ShapeMismatchError(f"expected a floating point tensor, got {x.dtype}")
    shape = Shape3D(*x.shape)
    if min(shape) == 0:
        raise ShapeMismatchError(f"feature map must not be empty, got {shape}")
    if expected_channels is not None and shape.channels != expected_channels:
        raise ShapeMismatchError(
            f"expected {expected_channels} input channels, got {shape.channels} (input shape {tuple(x.shape)})"
        )
    return shape


def check_vector(x, expected_length: int = None) -> int:
    """Validate a 1-D feature vector and return its length."""
    if not isinstance(x, torch.Tensor):
        raise ShapeMismatchError(f"expected a 1-D tensor, got {type(x).__name__}")
    if x.dim() != 1:
        raise ShapeMismatchError(f"expected a 1-D tensor, got shape {tuple(x.shape)}")
    if expected_length is not None and x.shape[0] != expected_length:
        raise ShapeMismatchError(f"expected input vector of length {expected_length}, got {x.shape[0]}")
    return x.shape[0]


__all__ = [
    "PipelineError",
    "ShapeMismatchError",
    "InvalidConfigError",
    "Shape3D",
    "conv_output_size",
    "pad2d",
    "check_tensor3d",
    "check_vector",
]
