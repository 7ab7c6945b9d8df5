"""
Signed image uploads to Cloudinary.

Background for newcomers:
    The frontend never talks to Cloudinary directly. It posts the file to
    ``/upload-image``; we forward it to Cloudinary's upload API using a
    *signed* request and hand back the hosted URL, which the frontend then
    stores on a user, event or notice record.

    A signed upload sends ``api_key``, ``timestamp`` and ``signature``, where
    the signature is the SHA-1 hex digest of the sorted upload parameters
    (``allowed_formats=...&folder=...&timestamp=...``) followed by the API
    secret. Signing ``allowed_formats`` makes Cloudinary enforce the same image
    formats we check locally. The secret itself never leaves this process.
"""

from __future__ import annotations

import hashlib
import logging
import time
from pathlib import PurePath
from typing import BinaryIO

import requests

from .config import MediaConfig

logger = logging.getLogger(__name__)


class MediaUploadError(Exception):
    """Raised when the media host rejects or fails an upload."""


class UnsupportedImageError(ValueError):
    """Raised when the file extension is not an allowed image format."""


def sign_params(params: dict[str, object], api_secret: str) -> str:
    """Return the Cloudinary signature for ``params``."""
    to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params))
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


class CloudinaryClient:
    """Uploads image files to Cloudinary and returns their hosted URL."""

    def __init__(self, config: MediaConfig) -> None:
        self._config = config

    def check_format(self, filename: str) -> str:
        fmt = PurePath(filename or "").suffix.lstrip(".").lower()
        if fmt not in self._config.allowed_formats:
            raise UnsupportedImageError(
                f"Unsupported image format. Allowed: {', '.join(sorted(self._config.allowed_formats))}"
            )
        return fmt

    def upload(self, filename: str, content: BinaryIO | bytes, content_type: str | None = None) -> str:
        """
        Upload one image and return its ``secure_url``.

        Raises UnsupportedImageError for disallowed extensions and
        MediaUploadError for configuration, network or host failures.
        """
        self.check_format(filename)
        if not self._config.configured:
            raise MediaUploadError("Cloudinary credentials are not configured")

        params: dict[str, object] = {
            "allowed_formats": ",".join(sorted(self._config.allowed_formats)),
            "folder": self._config.folder,
            "timestamp": int(time.time()),
        }
        data = {
            **params,
            "api_key": self._config.api_key,
            "signature": sign_params(params, self._config.api_secret or ""),
        }
        files = {"file": (filename, content, content_type or "application/octet-stream")}

        try:
            resp = requests.post(
                self._config.upload_url,
                data=data,
                files=files,
                timeout=self._config.timeout_seconds,
            )
            if resp.status_code != 200:
                logger.warning("Cloudinary upload returned status=%s", resp.status_code)
                raise MediaUploadError(f"Media host returned status {resp.status_code}")
            body = resp.json()
        except requests.RequestException as e:
            raise MediaUploadError(f"Upload request failed: {type(e).__name__}") from e
        except ValueError as e:
            raise MediaUploadError("Media host returned a non-JSON response") from e

        url = (body.get("secure_url") or body.get("url")) if isinstance(body, dict) else None
        if not url:
            raise MediaUploadError("No URL in media host response")

        logger.info("Uploaded image folder=%s", self._config.folder)
        return str(url)
