"""Models module."""
from .factory import build_model, register_model, list_models

__all__ = ['build_model', 'register_model', 'list_models']
