"""Pydantic schemas for the control catalog."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class FrameworkOut(BaseModel):
    id: str
    name: str | None = None
    type: str
    description: str | None = None
    version: str | None = None
    created_at: datetime
    updated_at: datetime
    model_config = {"from_attributes": True}


class QuestionOut(BaseModel):
    question_text: str
    options: dict[str, str] = {}


class ControlOut(BaseModel):
    id: str
    framework_id: str
    control_objective: str | None = None
    control_description: str | None = None
    questionnaires: list[QuestionOut] = []
    attributes: dict = {}
    created_at: datetime
    updated_at: datetime
    model_config = {"from_attributes": True}


class ControlSeed(BaseModel):
    """One control in a bulk seed payload. Unknown keys are kept as attributes."""
    model_config = ConfigDict(extra="allow")

    id: str | None = Field(None, max_length=100)
    framework_id: str = Field(..., min_length=1, max_length=100)
    control_objective: str | None = None
    control_description: str | None = None
    questionnaires: list[QuestionOut] = []


class SeedResult(BaseModel):
    message: str
    seededCount: int
