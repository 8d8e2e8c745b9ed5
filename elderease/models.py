"""Pydantic models for request/response schemas.

Field names follow the camelCase records the frontend reads and writes.
Request models allow extra fields because tasks and messages carry arbitrary
caller-supplied attributes that are stored verbatim.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

from elderease.db_models import TaskStatus

_DATA_URI_RE = re.compile(r"^data:image/\w+;base64,")


class TaskCreateRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: str | None = Field(default=None, max_length=500, description="Short task title")
    elderlyId: str | int | None = Field(default=None, description="Requester user id")
    status: str | None = Field(default=TaskStatus.created.value, max_length=100)
    elderlyConfirmed: bool | None = False


class TaskUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    status: str | None = Field(default=None, max_length=100)
    volunteerId: str | int | None = None
    elderlyConfirmed: bool | None = None
    rating: int | float | None = None
    archived: bool | None = None


class MessageRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    senderId: str | int = Field(..., description="User id of the sender")
    content: str = Field(..., min_length=1, max_length=5000, description="Message text")


class RateRequest(BaseModel):
    rating: int | float = Field(..., ge=0, le=5, description="Rating given to the user")
    taskId: str = Field(..., min_length=1, description="Task the rating is for")


class UploadRequest(BaseModel):
    base64: str = Field(..., min_length=1, description="Base64 image, optionally as a data URI")

    @field_validator("base64")
    @classmethod
    def strip_data_uri(cls, v: str) -> str:
        return _DATA_URI_RE.sub("", v)


class UploadResponse(BaseModel):
    id: str


class AckResponse(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    message: str


class TaskResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    title: str | None = None
    elderlyId: str | int | None = None
    volunteerId: str | int | None = None
    status: str | None = None
    elderlyConfirmed: bool | None = None
    rating: int | float | None = None
    archived: bool = False


class UserResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str | int
    userType: str | None = None
    firstName: str | None = None
    lastName: str | None = None
    ratings: list[int | float] = Field(default_factory=list)
    averageRating: float | None = None


class MessageResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    taskId: str
    senderId: str | int
    content: str
    createdAt: str | None = None


class NotificationResponse(BaseModel):
    id: str
    userId: str | int | None = None
    title: str
    message: str
    taskId: str | None = None
    read: bool = False
    createdAt: str
