"""Core puttr functionality."""
from .config import Settings, get_settings
from .security import TokenStore, parse_authorization

__all__ = ["get_settings", "Settings", "TokenStore", "parse_authorization"]
