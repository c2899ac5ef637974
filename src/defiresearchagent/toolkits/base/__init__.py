from .base_source import BaseSource

__all__ = [
    "BaseSource",
]
