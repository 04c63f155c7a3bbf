"""puttr services."""
from .materializer import (
    UploadMaterializer,
    UploadRecord,
    derive_path,
    resolve_extension,
    store,
)

__all__ = [
    "UploadMaterializer",
    "UploadRecord",
    "derive_path",
    "resolve_extension",
    "store",
]
