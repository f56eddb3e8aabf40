"""Weight and bias providers used when assembling a pipeline.

A provider only has to hand out tensors of the requested shape:

    provider.filters(num_filters, channels, kernel_h, kernel_w)
    provider.matrix(rows, cols)
    provider.vector(size)
"""
import torch

from tinyconv.utils.seed import make_generator, resolve_seed
from tinyconv.utils.shapes import InvalidConfigError


class NormalInitializer:
    """Draws every parameter from N(0, std^2) using an explicit generator.

    Args:
        std: Standard deviation of the normal distribution
        generator: torch.Generator to draw from. If None, one is seeded with ``seed``
        seed: Seed for the generator; a fresh one is drawn if None. The seed in
            use is kept as ``self.seed`` (None when a generator is passed in)
        dtype: dtype of the produced tensors
    """

    def __init__(self, std: float = 0.1, generator: torch.Generator = None, seed: int = None, dtype=torch.float32):
        if std < 0:
            raise InvalidConfigError(f"std must be non-negative, got {std}")
        if generator is not None and seed is not None:
            raise InvalidConfigError("pass either a generator or a seed, not both")
        self.std = std
        self.seed = None
        if generator is None:
            self.seed = resolve_seed(seed)
            generator = make_generator(self.seed)
        self.generator = generator
        self.dtype = dtype

    def _sample(self, *shape):
        return torch.randn(*shape, generator=self.generator, dtype=self.dtype) * self.std

    def filters(self, num_filters: int, channels: int, kernel_h: int, kernel_w: int) -> torch.Tensor:
        return self._sample(num_filters, channels, kernel_h, kernel_w)

    def matrix(self, rows: int, cols: int) -> torch.Tensor:
        return self._sample(rows, cols)

    def vector(self, size: int) -> torch.Tensor:
        return self._sample(size)


class ConstantInitializer:
    """Fills weights with ``value`` and biases with ``bias``. Mostly for tests."""

    def __init__(self, value: float = 0.0, bias: float = 0.0, dtype=torch.float32):
        self.value = value
        self.bias = bias
        self.dtype = dtype

    def filters(self, num_filters, channels, kernel_h, kernel_w):
        return torch.full((num_filters, channels, kernel_h, kernel_w), self.value, dtype=self.dtype)

    def matrix(self, rows, cols):
        return torch.full((rows, cols), self.value, dtype=self.dtype)

    def vector(self, size):
        return torch.full((size,), self.bias, dtype=self.dtype)


def build_initializer(cfg: dict):
    """Build a parameter provider from the ``init`` section of a config.

    Args:
        cfg: Full configuration dictionary; reads init.name, init.std,
             init.value, init.bias and init.seed.
    """
    init_cfg = cfg.get("init", {}) or {}
    name = str(init_cfg.get("name", "normal")).lower()

    if name == "normal":
        return NormalInitializer(std=float(init_cfg.get("std", 0.1)), seed=init_cfg.get("seed"))
    elif name == "constant":
        return ConstantInitializer(
            value=float(init_cfg.get("value", 0.0)),
            bias=float(init_cfg.get("bias", 0.0)),
        )
    elif name == "zeros":
        return ConstantInitializer(0.0, 0.0)
    else:
        raise InvalidConfigError(f"Unknown initializer '{name}'. Choose from: normal, constant, zeros")


__all__ = ["NormalInitializer", "ConstantInitializer", "build_initializer"]
