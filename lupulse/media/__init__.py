"""
Client for the hosted media service (Cloudinary).

This package has no dependency on the database or security packages.
"""

from .client import CloudinaryClient, MediaUploadError, UnsupportedImageError
from .config import MediaConfig

__all__ = [
    "CloudinaryClient",
    "MediaConfig",
    "MediaUploadError",
    "UnsupportedImageError",
]
