"""Small nested shapes shared by several resource schemas."""

from pydantic import BaseModel

from app.models.personnel import PersonnelRole


class PersonnelBrief(BaseModel):
    id: str
    name: str
    avatar_url: str | None = None
    role: PersonnelRole
    experience_years: int | None = 0

    model_config = {"from_attributes": True}


class CategoryBrief(BaseModel):
    id: str
    name: str

    model_config = {"from_attributes": True}


class GradeBrief(BaseModel):
    # id/badge_url are absent when only the grade text is known
    id: str | None = None
    name: str
    badge_url: str | None = None

    model_config = {"from_attributes": True}


class PlotName(BaseModel):
    name: str

    model_config = {"from_attributes": True}


class RecorderBrief(BaseModel):
    name: str
    avatar_url: str | None = None
    role: PersonnelRole
    experience_years: int | None = 0

    model_config = {"from_attributes": True}


class MessageResponse(BaseModel):
    message: str
