"""Simple CNN pipeline driver."""
import logging
from typing import Callable, List, Optional, Sequence, Tuple

import torch
import torch.nn as nn

from .init import NormalInitializer
from .layers import ConvLayer, DenseLayer, FlattenLayer, MaxPoolLayer
from tinyconv.utils.shapes import InvalidConfigError, Shape3D, check_tensor3d, conv_output_size

logger = logging.getLogger(__name__)


class SimpleCNN(nn.Module):
    """Conv/pool blocks, flatten and two dense layers, run forward only.

    Stages are named conv1, pool1, conv2, pool2, ..., flatten, fc1, fc2. The
    first dense layer's input size is derived analytically from the input
    shape before any layer is built, so no dummy forward pass is needed.

    Args:
        input_shape: (channels, height, width) of the input tensor
        num_classes: Length of the output score vector
        channels: Number of filters of each conv layer, one conv/pool block per entry
        fc_dim: Width of the hidden dense layer
        kernel_size: Square kernel size of every conv layer
        conv_stride: Stride of every conv layer
        conv_padding: Zero padding of every conv layer
        pool_size: Window size of every pooling layer
        pool_stride: Stride of every pooling layer
        activation: Activation name or callable applied after every conv/dense layer
        initializer: Weight/bias provider (NormalInitializer with std 0.1 if None)
    """

    def __init__(
        self,
        input_shape: Tuple[int, int, int] = (1, 28, 28),
        num_classes: int = 10,
        channels: Sequence[int] = (3, 5),
        fc_dim: int = 128,
        kernel_size: int = 3,
        conv_stride: int = 1,
        conv_padding: int = 1,
        pool_size: int = 2,
        pool_stride: int = 2,
        activation="relu",
        initializer=None,
    ):
        super().__init__()

        if not channels:
            raise InvalidConfigError("at least one conv layer is required")
        if min(list(channels) + [fc_dim, num_classes]) <= 0:
            raise InvalidConfigError(
                f"filter counts, fc_dim and num_classes must be positive, got "
                f"channels={list(channels)}, fc_dim={fc_dim}, num_classes={num_classes}"
            )
        self.input_shape = Shape3D(*input_shape)
        if min(self.input_shape) <= 0:
            raise InvalidConfigError(f"input shape must be positive, got {tuple(self.input_shape)}")
        init = initializer if initializer is not None else NormalInitializer()

        # Phase 1: plan every feature map shape
        shape = self.input_shape
        block_specs = []
        for out_channels in channels:
            conv_shape = Shape3D(
                out_channels,
                conv_output_size(shape.height, kernel_size, conv_stride, conv_padding),
                conv_output_size(shape.width, kernel_size, conv_stride, conv_padding),
            )
            pool_shape = Shape3D(
                out_channels,
                conv_output_size(conv_shape.height, pool_size, pool_stride),
                conv_output_size(conv_shape.width, pool_size, pool_stride),
            )
            block_specs.append((shape.channels, out_channels))
            shape = pool_shape
        flat_dim = shape.numel

        # Phase 2: build layers with fully known shapes
        self.stages = nn.ModuleDict()
        for i, (in_channels, out_channels) in enumerate(block_specs, start=1):
            self.stages[f"conv{i}"] = ConvLayer(
                init.filters(out_channels, in_channels, kernel_size, kernel_size),
                init.vector(out_channels),
                stride=conv_stride,
                padding=conv_padding,
                activation=activation,
            )
            self.stages[f"pool{i}"] = MaxPoolLayer(pool_size, pool_stride)
        self.stages["flatten"] = FlattenLayer()
        self.stages["fc1"] = DenseLayer(init.matrix(fc_dim, flat_dim), init.vector(fc_dim), activation)
        self.stages["fc2"] = DenseLayer(init.matrix(num_classes, fc_dim), init.vector(num_classes), activation)
        self.num_classes = num_classes

        for name, out_shape in self.plan():
            logger.debug(f"{name}: {out_shape}")

    def plan(self) -> List[Tuple[str, object]]:
        """Output shape of every stage, computed without running the network.

        Feature map stages report a Shape3D, vector stages an int length.
        """
        shape = self.input_shape
        planned = []
        for name, stage in self.stages.items():
            shape = stage.output_shape(shape)
            planned.append((name, shape))
        return planned

    @property
    def flat_dim(self) -> int:
        return self.stages["fc1"].in_features

    @torch.no_grad()
    def forward(self, x: torch.Tensor, on_stage: Optional[Callable[[str, torch.Tensor], None]] = None):
        """Run ``x`` (C, H, W) through every stage and return the class scores.

        Args:
            x: Input tensor of shape input_shape
            on_stage: Optional callback called as on_stage(name, output) after each stage
        """
        check_tensor3d(x, expected_channels=self.input_shape.channels)
        for name, stage in self.stages.items():
            x = stage(x)
            if on_stage is not None:
                on_stage(name, x)
        return x

    def predict(self, x: torch.Tensor) -> Tuple[torch.Tensor, int]:
        """Return the score vector and the index of the highest score."""
        scores = self(x)
        return scores, int(torch.argmax(scores).item())
