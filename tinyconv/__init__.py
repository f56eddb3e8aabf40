"""tinyconv: forward inference of a small convolutional network."""
__version__ = "0.1.0"
