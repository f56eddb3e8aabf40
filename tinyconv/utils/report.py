"""Console reporting and logging setup."""
import logging
import os
from typing import Optional

import torch

from tinyconv.utils.shapes import Shape3D


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """Setup logging to console and optionally to a file."""
    logger = logging.getLogger("tinyconv")
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    logger.handlers.clear()  # Clear existing handlers

    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def format_dimensions(label: str, x: torch.Tensor) -> str:
    """One line describing a stage output, e.g. 'After conv1: 3 channels 28x28'."""
    if x.dim() == 3:
        return f"After {label}: {Shape3D(*x.shape)}"
    return f"After {label}: {x.numel()} values"


def print_dimensions(label: str, x: torch.Tensor):
    if label == "flatten":
        print(f"Flattened size: {x.numel()}")
    else:
        print(format_dimensions(label, x))


def print_results(scores: torch.Tensor, predicted: int):
    """Pretty print the final score vector."""
    print("\n" + "=" * 60)
    print("FORWARD PASS RESULTS")
    print("=" * 60)
    print(f"\nFinal output: {[round(v, 6) for v in scores.tolist()]}")
    print(f"Predicted class: {predicted} (score {scores[predicted].item():.6f})")
    print("\n" + "=" * 60)


__all__ = ["setup_logging", "format_dimensions", "print_dimensions", "print_results"]
