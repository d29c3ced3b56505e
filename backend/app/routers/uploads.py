"""Upload router: media files for the admin console.

Endpoints:
    POST /api/upload                          Any image or video (field ``media``)
    POST /api/upload-image                    Image with an absolute URL (field ``image``)
    POST /api/weather-templates/upload-icon   SVG weather icon (field ``svg_file``)

Each accepts an optional ``category`` form field naming the target folder.
"""

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from app.auth.deps import require_login
from app.schemas.upload import (
    UploadedImage,
    UploadImageResponse,
    UploadOut,
    WeatherIconUpload,
    WeatherIconUploadResponse,
)
from app.services.uploads import SVG_TYPES, StoredUpload, public_base_url, save_upload

router = APIRouter(dependencies=[Depends(require_login)])


def _upload_out(stored: StoredUpload) -> dict:
    return {
        "url": stored.url,
        "filename": stored.filename,
        "original_name": stored.original_name,
        "size": stored.size,
        "mimetype": stored.mimetype,
        "category": stored.category,
    }


@router.post("/upload", response_model=UploadOut)
async def upload_file(
    media: UploadFile | None = File(None),
    category: str | None = Form(None),
):
    stored = await save_upload(media, category)
    return UploadOut(**_upload_out(stored))


@router.post("/upload-image", response_model=UploadImageResponse)
async def upload_image(
    request: Request,
    image: UploadFile | None = File(None),
    category: str | None = Form(None),
):
    stored = await save_upload(image, category)
    return UploadImageResponse(
        data=UploadedImage(
            **_upload_out(stored),
            full_url=f"{public_base_url(request)}{stored.url}",
        )
    )


@router.post("/weather-templates/upload-icon", response_model=WeatherIconUploadResponse)
async def upload_weather_icon(svg_file: UploadFile | None = File(None)):
    stored = await save_upload(svg_file, "weather", allowed_types=SVG_TYPES)
    return WeatherIconUploadResponse(
        data=WeatherIconUpload(
            url=stored.url,
            filename=stored.filename,
            original_name=stored.original_name,
        )
    )
