"""Comment, attachment and notification payload schemas."""

from typing import Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from src.taskboard.core.config import get_settings
from src.taskboard.core.validators import (
    MAX_COMMENT_LENGTH,
    MAX_NAME_LENGTH,
    validate_identifier,
    validate_optional_text,
    validate_required_text,
    validate_url,
)
from src.taskboard.models import NotificationType


class _ParentRef(BaseModel):
    """Exactly one of ``task_id`` / ``project_id`` must be set."""

    model_config = ConfigDict(extra="forbid")

    task_id: str | None = None
    project_id: str | None = None

    @field_validator("task_id", "project_id")
    @classmethod
    def validate_parent_id(cls, v: str | None) -> str | None:
        v = validate_optional_text(v)
        return validate_identifier(v) if v is not None else None

    @model_validator(mode="after")
    def check_single_parent(self) -> Self:
        if (self.task_id is None) == (self.project_id is None):
            raise ValueError("Exactly one of task_id or project_id must be set")
        return self


class CommentCreate(_ParentRef):
    content: str = Field(min_length=1, max_length=MAX_COMMENT_LENGTH)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        return validate_required_text(v, "Comment")


class AttachmentCreate(_ParentRef):
    """Metadata for a file already uploaded to storage."""

    file_name: str = Field(min_length=1, max_length=255)
    file_url: str
    file_type: str = Field(default="application/octet-stream", max_length=MAX_NAME_LENGTH)
    size: int = Field(ge=0, strict=True)

    @field_validator("file_name")
    @classmethod
    def validate_file_name(cls, v: str) -> str:
        v = validate_required_text(v, "File name")
        if "/" in v or "\\" in v:
            raise ValueError("File name cannot contain path separators")
        return v

    @field_validator("file_url")
    @classmethod
    def validate_file_url(cls, v: str) -> str:
        return validate_url(v)

    @field_validator("size")
    @classmethod
    def validate_size(cls, v: int) -> int:
        limit = get_settings().max_attachment_size_bytes
        if v > limit:
            raise ValueError(f"File exceeds the {limit} byte limit")
        return v


class NotificationCreate(BaseModel):
    """System-generated notification; never authored by an actor directly."""

    user_id: str
    title: str = Field(min_length=1, max_length=MAX_NAME_LENGTH)
    message: str = Field(min_length=1, max_length=1000)
    type: NotificationType = NotificationType.INFO
    link: str | None = None
