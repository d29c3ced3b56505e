"""Response shapes for media uploads."""

from pydantic import BaseModel, Field


class UploadOut(BaseModel):
    url: str
    filename: str
    original_name: str = Field(alias="originalName")
    size: int
    mimetype: str
    category: str

    model_config = {"populate_by_name": True}


class UploadedImage(UploadOut):
    full_url: str = Field(alias="fullUrl")


class UploadImageResponse(BaseModel):
    data: UploadedImage


class WeatherIconUpload(BaseModel):
    url: str
    filename: str
    original_name: str = Field(alias="originalName")

    model_config = {"populate_by_name": True}


class WeatherIconUploadResponse(BaseModel):
    data: WeatherIconUpload
