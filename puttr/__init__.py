"""puttr: authenticated PUT-to-file service."""
__version__ = "1.0.0"
