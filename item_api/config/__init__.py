from .config import ItemApiConfig

__all__ = ["ItemApiConfig"]
