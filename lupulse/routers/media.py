from __future__ import annotations

from fastapi import APIRouter, Depends, File, Request, UploadFile

from lupulse.errors import ValidationError
from lupulse.media import CloudinaryClient, UnsupportedImageError
from lupulse.schemas.campus import UploadOut

router = APIRouter(tags=["media"])


def get_media_client(request: Request) -> CloudinaryClient:
    client = getattr(request.app.state, "media_client", None)
    if client is None:
        raise RuntimeError("Media client not configured. Was the app built with create_app()?")
    return client


@router.post("/upload-image", response_model=UploadOut)
def upload_image(
    image: UploadFile | None = File(None),
    media: CloudinaryClient = Depends(get_media_client),
) -> UploadOut:
    if image is None or not image.filename:
        raise ValidationError("No file uploaded")

    try:
        url = media.upload(image.filename, image.file, image.content_type)
    except UnsupportedImageError as exc:
        raise ValidationError(str(exc)) from exc

    return UploadOut(success=True, message="Image uploaded successfully", image_url=url)
