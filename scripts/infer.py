#!/usr/bin/env python3
"""
Forward inference script for tinyconv models.

Usage:
    python scripts/infer.py --image android_Ninja.png
    python scripts/infer.py --config configs/simple_cnn.yaml --image digit.png --seed 0
    python scripts/infer.py --image digit.png --set model.name=simple_cnn_wide --output results/scores.json
"""
import argparse
import json
import os
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from tinyconv.datasets import load_grayscale
from tinyconv.models.factory import build_model
from tinyconv.models.init import build_initializer
from tinyconv.utils.config import load_config
from tinyconv.utils.report import print_dimensions, print_results, setup_logging


def main(args):
    cfg = load_config(args.config, args.set)
    if args.image:
        cfg["data"]["image"] = args.image
    if args.seed is not None:
        cfg["init"]["seed"] = args.seed

    log_cfg = cfg.get("logging", {})
    logger = setup_logging(log_cfg.get("level", "INFO"), log_cfg.get("log_file"))
    logger.info(f"Config: {cfg}")

    image_path = cfg["data"].get("image")
    if not image_path:
        raise ValueError("No input image given (use --image or data.image in the config)")

    # Load and prepare image
    img_size = cfg["data"].get("img_size", 28)
    try:
        x = load_grayscale(image_path, img_size)
    except Exception:
        logger.exception(f"Failed to load image: {image_path}")
        raise
    logger.info(f"Loaded {image_path} as {tuple(x.shape)} input")

    # Build model; record the seed actually used so the run can be repeated
    initializer = build_initializer(cfg)
    seed = getattr(initializer, "seed", None)
    if seed is not None:
        cfg["init"]["seed"] = seed
        logger.info(f"Initialization seed: {seed}")
    model = build_model(cfg, initializer=initializer)
    num_params = sum(b.numel() for b in model.buffers())
    logger.info(f"Model: {cfg['model']['name']}, Parameters: {num_params:,}")

    # Forward pass with dimension reports after every stage
    scores = model(x, on_stage=print_dimensions)
    predicted = int(scores.argmax().item())
    print_results(scores, predicted)

    # Save results if requested
    if args.output:
        out_dir = os.path.dirname(args.output)
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)
        with open(args.output, "w") as f:
            json.dump({
                "image": str(image_path),
                "model": cfg["model"]["name"],
                "seed": cfg["init"].get("seed"),
                "scores": scores.tolist(),
                "predicted": predicted,
            }, f, indent=2)
        logger.info(f"Results saved to: {args.output}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run one forward pass over an image")
    parser.add_argument("--config", type=str, default=None, help="Path to config YAML file")
    parser.add_argument("--image", type=str, default=None, help="Input image (overrides data.image)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for weight initialization (overrides init.seed)")
    parser.add_argument("--output", type=str, default=None, help="Path to save scores JSON")
    parser.add_argument("--set", nargs="+", default=[], metavar="KEY=VALUE",
                        help="Override config values, e.g. --set model.name=simple_cnn_wide init.std=0.05")
    args = parser.parse_args()

    main(args)
