import sys
from pathlib import Path

import pytest
import torch

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from tinyconv.models.init import NormalInitializer


@pytest.fixture
def generator():
    return torch.Generator().manual_seed(1234)


@pytest.fixture
def normal_init(generator):
    return NormalInitializer(std=0.1, generator=generator)
