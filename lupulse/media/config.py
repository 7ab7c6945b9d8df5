"""Cloudinary configuration. Built from settings; no hardcoded secrets."""

from __future__ import annotations

from dataclasses import dataclass

from lupulse.settings import Settings

UPLOAD_URL_TEMPLATE = "https://api.cloudinary.com/v1_1/{cloud_name}/image/upload"


@dataclass(frozen=True)
class MediaConfig:
    """
    Hosted media (Cloudinary) configuration.

    Required for uploads:
        APP_CLOUD_NAME: Cloudinary cloud name.
        APP_CLOUD_API_KEY / APP_CLOUD_API_SECRET: signed-upload credentials.

    Optional:
        APP_MEDIA_FOLDER: Folder uploads land in (default "LuPulse").
        APP_MEDIA_TIMEOUT_SECONDS: Outbound request timeout (default 30).
    """

    cloud_name: str | None
    api_key: str | None
    api_secret: str | None
    folder: str
    timeout_seconds: int
    allowed_formats: frozenset[str] = frozenset({"jpg", "jpeg", "png"})

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    @property
    def upload_url(self) -> str:
        return UPLOAD_URL_TEMPLATE.format(cloud_name=self.cloud_name)

    @classmethod
    def from_settings(cls, settings: Settings) -> MediaConfig:
        return cls(
            cloud_name=_strip_or_none(settings.cloud_name),
            api_key=_strip_or_none(settings.cloud_api_key),
            api_secret=_strip_or_none(settings.cloud_api_secret),
            folder=settings.media_folder,
            timeout_seconds=settings.media_timeout_seconds,
        )


def _strip_or_none(s: str | None) -> str | None:
    if s is None:
        return None
    t = s.strip()
    return t if t else None
