"""Utilities for seeding random number generators."""
import logging
from typing import Optional

import numpy as np
import torch

logger = logging.getLogger(__name__)


def resolve_seed(seed: Optional[int] = None) -> int:
    """Return ``seed`` as an int, drawing a fresh one from the OS if None."""
    if seed is None:
        seed = int(np.random.SeedSequence().entropy % (2**63))
        logger.debug(f"No seed given, drew seed {seed}")
    return int(seed)


def make_generator(seed: Optional[int] = None) -> torch.Generator:
    """Create a torch.Generator for parameter initialization.

    Args:
        seed: Integer seed, or None to draw a fresh seed (see resolve_seed).
    """
    generator = torch.Generator()
    generator.manual_seed(resolve_seed(seed))
    return generator


__all__ = ['resolve_seed', 'make_generator']
