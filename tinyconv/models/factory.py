"""Model factory for building pipelines from config."""
from .init import build_initializer
from .simple_cnn import simple_cnn, simple_cnn_wide


MODEL_REGISTRY = {
    "simple_cnn": simple_cnn,
    "simple_cnn_wide": simple_cnn_wide,
}


def build_model(cfg: dict, initializer=None):
    """Build a model from config.

    Args:
        cfg: Configuration dictionary with model.name, model.num_classes,
             optionally model.activation, plus data.in_channels and data.img_size
             for the input shape.
        initializer: Weight/bias provider; built from the ``init`` section if None.

    Returns:
        nn.Module: Instantiated model
    """
    name = cfg["model"]["name"]
    num_classes = cfg["model"]["num_classes"]
    activation = cfg["model"].get("activation", "relu")
    data_cfg = cfg.get("data", {})
    img_size = data_cfg.get("img_size", 28)
    input_shape = (data_cfg.get("in_channels", 1), img_size, img_size)

    if name not in MODEL_REGISTRY:
        available = list(MODEL_REGISTRY.keys())
        raise ValueError(f"Unknown model '{name}'. Available: {available}")

    if initializer is None:
        initializer = build_initializer(cfg)

    model_fn = MODEL_REGISTRY[name]
    return model_fn(
        num_classes=num_classes,
        input_shape=input_shape,
        activation=activation,
        initializer=initializer,
    )


def register_model(name: str, model_fn):
    """Register a new model to the factory."""
    MODEL_REGISTRY[name] = model_fn


def list_models():
    """List all available models."""
    return list(MODEL_REGISTRY.keys())
