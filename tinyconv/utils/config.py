"""YAML configuration loading with defaults and KEY=VALUE overrides."""
import copy
from typing import Iterable, Optional

import yaml

DEFAULT_CONFIG = {
    "model": {
        "name": "simple_cnn",
        "num_classes": 10,
        "activation": "relu",
    },
    "data": {
        "image": None,
        "img_size": 28,
        "in_channels": 1,
    },
    "init": {
        "name": "normal",
        "std": 0.1,
        "seed": None,
    },
    "logging": {
        "level": "INFO",
        "log_file": None,
    },
}


def merge_config(base: dict, override: dict) -> dict:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def parse_value(value: str):
    """Auto-convert an override value to int, float, bool, None or str."""
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    if value.lower() == 'true':
        return True
    if value.lower() == 'false':
        return False
    if value.lower() in ('none', 'null'):
        return None
    return value


def apply_overrides(cfg: dict, overrides: Iterable[str]) -> dict:
    """Apply overrides like ``model.name=simple_cnn_wide`` to ``cfg`` in place."""
    for override in overrides or []:
        if '=' not in override:
            raise ValueError(f"Invalid --set format: '{override}'. Expected KEY=VALUE")
        key, value = override.split('=', 1)
        keys = key.split('.')
        if not all(keys):
            raise ValueError(f"Invalid --set key: '{key}'")
        # Set nested key
        d = cfg
        for k in keys[:-1]:
            if not isinstance(d.get(k), dict):
                d[k] = {}
            d = d[k]
        d[keys[-1]] = parse_value(value)
    return cfg


def load_config(path: Optional[str] = None, overrides: Iterable[str] = ()) -> dict:
    """Load a YAML config on top of DEFAULT_CONFIG and apply overrides."""
    cfg = copy.deepcopy(DEFAULT_CONFIG)
    if path:
        with open(path) as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Config file {path} must contain a mapping, got {type(loaded).__name__}")
        cfg = merge_config(cfg, loaded)
    return apply_overrides(cfg, overrides)


__all__ = ["DEFAULT_CONFIG", "merge_config", "parse_value", "apply_overrides", "load_config"]
