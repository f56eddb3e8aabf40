"""Inference layers: convolution, max pooling, flatten and dense."""
from typing import Callable, Union

import torch
import torch.nn as nn
import torch.nn.functional as F

from tinyconv.utils.shapes import (
    InvalidConfigError,
    Shape3D,
    ShapeMismatchError,
    check_tensor3d,
    check_vector,
    conv_output_size,
    pad2d,
)


def relu(x: torch.Tensor) -> torch.Tensor:
    """Elementwise max(0, x)."""
    return torch.clamp_min(x, 0.0)


def as_float_tensor(values) -> torch.Tensor:
    """Convert parameters to a tensor, promoting integer or bool data to the default float dtype."""
    tensor = torch.as_tensor(values)
    if not tensor.is_floating_point():
        tensor = tensor.to(torch.get_default_dtype())
    return tensor


_ACTIVATIONS = {
    "relu": relu,
}


def get_activation(activation: Union[str, Callable, None] = "relu") -> Callable:
    """Return an activation function: act_fn(tensor) -> tensor.

    Args:
        activation: A registered name ('relu'), a callable, or None for the default.
    """
    if activation is None:
        return relu
    if callable(activation):
        return activation
    name = activation.lower()
    if name not in _ACTIVATIONS:
        raise InvalidConfigError(
            f"Unknown activation '{activation}'. Choose from: {', '.join(_ACTIVATIONS)}"
        )
    return _ACTIVATIONS[name]


class ConvLayer(nn.Module):
    """2-D cross-correlation with zero padding, bias and activation.

    Args:
        filters: Filter bank of shape (num_filters, in_channels, kernel_h, kernel_w)
        biases: One bias per filter
        stride: Step between window positions
        padding: Zero border added to every input channel
        activation: Activation name or callable (default relu)
    """

    def __init__(self, filters, biases, stride: int = 1, padding: int = 0, activation="relu"):
        super().__init__()
        filters = as_float_tensor(filters)
        biases = torch.as_tensor(biases, dtype=filters.dtype)
        if filters.dim() != 4:
            raise InvalidConfigError(
                f"filter bank must be (filters, channels, kernel_h, kernel_w), got shape {tuple(filters.shape)}"
            )
        if min(filters.shape) <= 0:
            raise InvalidConfigError(f"filter bank dimensions must be positive, got {tuple(filters.shape)}")
        if biases.shape != (filters.shape[0],):
            raise InvalidConfigError(
                f"expected {filters.shape[0]} biases (one per filter), got shape {tuple(biases.shape)}"
            )
        if stride <= 0:
            raise InvalidConfigError(f"stride must be positive, got {stride}")
        if padding < 0:
            raise InvalidConfigError(f"padding must be non-negative, got {padding}")

        self.register_buffer("filters", filters.clone())
        self.register_buffer("biases", biases.clone())
        self.stride = stride
        self.padding = padding
        self.activation = get_activation(activation)

    @property
    def num_filters(self) -> int:
        return self.filters.shape[0]

    @property
    def in_channels(self) -> int:
        return self.filters.shape[1]

    @property
    def kernel_size(self):
        return tuple(self.filters.shape[2:])

    def output_shape(self, input_shape: Shape3D) -> Shape3D:
        input_shape = Shape3D(*input_shape)
        if input_shape.channels != self.in_channels:
            raise ShapeMismatchError(
                f"expected {self.in_channels} input channels, got {input_shape.channels}"
            )
        kernel_h, kernel_w = self.kernel_size
        return Shape3D(
            self.num_filters,
            conv_output_size(input_shape.height, kernel_h, self.stride, self.padding),
            conv_output_size(input_shape.width, kernel_w, self.stride, self.padding),
        )

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        shape = check_tensor3d(x, expected_channels=self.in_channels)
        self.output_shape(shape)
        dtype = torch.promote_types(x.dtype, self.filters.dtype)
        padded = pad2d(x.to(dtype), self.padding)
        # padded: (C, H + 2p, W + 2p) -> out: (F, out_h, out_w)
        out = F.conv2d(
            padded.unsqueeze(0), self.filters.to(dtype), self.biases.to(dtype), stride=self.stride
        )
        return self.activation(out.squeeze(0))

    def extra_repr(self):
        return (
            f"in_channels={self.in_channels}, filters={self.num_filters}, "
            f"kernel_size={self.kernel_size}, stride={self.stride}, padding={self.padding}"
        )


class MaxPoolLayer(nn.Module):
    """Per-channel maximum over square windows, without padding."""

    def __init__(self, pool_size: int = 2, stride: int = 2):
        super().__init__()
        if pool_size <= 0:
            raise InvalidConfigError(f"pool size must be positive, got {pool_size}")
        if stride <= 0:
            raise InvalidConfigError(f"stride must be positive, got {stride}")
        self.pool_size = pool_size
        self.stride = stride

    def output_shape(self, input_shape: Shape3D) -> Shape3D:
        input_shape = Shape3D(*input_shape)
        return Shape3D(
            input_shape.channels,
            conv_output_size(input_shape.height, self.pool_size, self.stride),
            conv_output_size(input_shape.width, self.pool_size, self.stride),
        )

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        self.output_shape(check_tensor3d(x))
        out = F.max_pool2d(x.unsqueeze(0), kernel_size=self.pool_size, stride=self.stride)
        return out.squeeze(0)

    def extra_repr(self):
        return f"pool_size={self.pool_size}, stride={self.stride}"


class FlattenLayer(nn.Module):
    """Flatten (C, H, W) into a vector: channel, then row, then column."""

    def output_shape(self, input_shape: Shape3D) -> int:
        return Shape3D(*input_shape).numel

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        check_tensor3d(x)
        return x.contiguous().reshape(-1).clone()


def unflatten(vector: torch.Tensor, shape: Shape3D) -> torch.Tensor:
    """Inverse of FlattenLayer for a known (C, H, W) shape."""
    shape = Shape3D(*shape)
    check_vector(vector, expected_length=shape.numel)
    return vector.reshape(shape.channels, shape.height, shape.width).clone()


class DenseLayer(nn.Module):
    """Affine projection ``weights @ x + biases`` followed by activation."""

    def __init__(self, weights, biases, activation="relu"):
        super().__init__()
        weights = as_float_tensor(weights)
        biases = torch.as_tensor(biases, dtype=weights.dtype)
        if weights.dim() != 2 or min(weights.shape) <= 0:
            raise InvalidConfigError(
                f"weight matrix must be a non-empty (out_features, in_features) matrix, got shape {tuple(weights.shape)}"
            )
        if biases.shape != (weights.shape[0],):
            raise InvalidConfigError(
                f"expected {weights.shape[0]} biases (one per neuron), got shape {tuple(biases.shape)}"
            )
        self.register_buffer("weights", weights.clone())
        self.register_buffer("biases", biases.clone())
        self.activation = get_activation(activation)

    @property
    def in_features(self) -> int:
        return self.weights.shape[1]

    @property
    def out_features(self) -> int:
        return self.weights.shape[0]

    def output_shape(self, input_length: int) -> int:
        if input_length != self.in_features:
            raise ShapeMismatchError(
                f"expected input vector of length {self.in_features}, got {input_length}"
            )
        return self.out_features

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        check_vector(x, expected_length=self.in_features)
        dtype = torch.promote_types(x.dtype, self.weights.dtype)
        return self.activation(F.linear(x.to(dtype), self.weights.to(dtype), self.biases.to(dtype)))

    def extra_repr(self):
        return f"in_features={self.in_features}, out_features={self.out_features}"


__all__ = [
    "relu",
    "get_activation",
    "ConvLayer",
    "MaxPoolLayer",
    "FlattenLayer",
    "DenseLayer",
    "unflatten",
]
