from .client import ResourceClient

__all__ = ["ResourceClient"]
