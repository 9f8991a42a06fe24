from likeable.plugin import LikeablePlugin

__version__ = "0.1.0"

__all__ = ["LikeablePlugin", "__version__"]
