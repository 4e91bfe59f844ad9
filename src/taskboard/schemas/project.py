"""Project payload schemas."""

from datetime import date
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from src.taskboard.core.validators import (
    MAX_DESCRIPTION_LENGTH,
    MAX_NAME_LENGTH,
    validate_identifier,
    validate_identifiers,
    validate_required_text,
)
from src.taskboard.models import Priority, ProjectStatus


def _blank_date_to_none(v: object) -> object:
    return None if v == "" else v


class ProjectCreate(BaseModel):
    """Schema for creating a project."""

    model_config = ConfigDict(extra="forbid")

    company_id: str
    name: str = Field(min_length=1, max_length=MAX_NAME_LENGTH)
    description: str = Field(default="", max_length=MAX_DESCRIPTION_LENGTH)
    leader_id: str
    status: ProjectStatus = ProjectStatus.ACTIVE
    priority: Priority = Priority.MEDIUM
    start_date: date | None = None
    due_date: date | None = None
    members: frozenset[str] = frozenset()

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return validate_required_text(v, "Project name")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        return v.strip()

    @field_validator("company_id", "leader_id")
    @classmethod
    def validate_ids(cls, v: str) -> str:
        return validate_identifier(v)

    @field_validator("members")
    @classmethod
    def validate_members(cls, v: frozenset[str]) -> frozenset[str]:
        return validate_identifiers(v)

    @field_validator("start_date", "due_date", mode="before")
    @classmethod
    def validate_dates(cls, v: object) -> object:
        return _blank_date_to_none(v)

    @model_validator(mode="after")
    def check_schedule(self) -> Self:
        if self.start_date and self.due_date and self.due_date < self.start_date:
            raise ValueError("Due date cannot be before the start date")
        return self


class ProjectUpdate(BaseModel):
    """Schema for updating a project.

    ``company_id`` is immutable and deliberately absent; sending it is an error.
    The leader changes through assign_project_leader, not here.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=MAX_DESCRIPTION_LENGTH)
    status: ProjectStatus | None = None
    priority: Priority | None = None
    start_date: date | None = None
    due_date: date | None = None
    members: frozenset[str] | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is not None:
            return validate_required_text(v, "Project name")
        return v

    @field_validator("members")
    @classmethod
    def validate_members(cls, v: frozenset[str] | None) -> frozenset[str] | None:
        return validate_identifiers(v) if v is not None else None

    @field_validator("start_date", "due_date", mode="before")
    @classmethod
    def validate_dates(cls, v: object) -> object:
        return _blank_date_to_none(v)
