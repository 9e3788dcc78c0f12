from .client import ForgejoClient

__all__ = ["ForgejoClient"]
