"""Simple CNN model variants for small grayscale images."""
from .simple_cnn_impl import SimpleCNN


def simple_cnn(num_classes: int = 10, **kwargs) -> SimpleCNN:
    """Simple CNN baseline - tiny model for 28x28 grayscale inputs.

    Parameters: ~32K
    Architecture: 2 conv layers [3, 5] + 2 FC layers [128, num_classes]
    """
    return SimpleCNN(
        num_classes=num_classes,
        channels=[3, 5],
        fc_dim=128,
        **kwargs
    )


def simple_cnn_wide(num_classes: int = 10, **kwargs) -> SimpleCNN:
    """Simple CNN Wide - more filters per conv layer.

    Parameters: ~420K
    Architecture: 2 conv layers [32, 64] + 2 FC layers [128, num_classes]
    """
    return SimpleCNN(
        num_classes=num_classes,
        channels=[32, 64],
        fc_dim=128,
        **kwargs
    )
