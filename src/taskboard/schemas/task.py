from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.taskboard.core.validators import (
    MAX_DESCRIPTION_LENGTH,
    MAX_NAME_LENGTH,
    validate_identifier,
    validate_identifiers,
    validate_optional_text,
    validate_required_text,
)
from src.taskboard.models import Priority, Subtask, TaskStatus, new_id
from src.taskboard.models.base import EmbeddedModel


class SubtaskInput(EmbeddedModel):
    """Subtask as submitted by an editor; ``id`` is minted when absent."""

    id: str = Field(default_factory=new_id)
    title: str = Field(min_length=1, max_length=MAX_NAME_LENGTH)
    status: bool = False
    leader_id: str | None = None
    member_ids: frozenset[str] = frozenset()

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return validate_required_text(v, "Subtask title")

    @field_validator("leader_id", mode="before")
    @classmethod
    def validate_leader_id(cls, v: str | None) -> str | None:
        v = validate_optional_text(v)
        return validate_identifier(v) if v is not None else None

    @field_validator("member_ids")
    @classmethod
    def validate_member_ids(cls, v: frozenset[str]) -> frozenset[str]:
        return validate_identifiers(v)

    def to_subtask(self) -> Subtask:
        return Subtask(**self.model_dump())


class TaskCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    project_id: str
    title: str = Field(min_length=1, max_length=MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=MAX_DESCRIPTION_LENGTH)
    status: TaskStatus = TaskStatus.TODO
    priority: Priority = Priority.MEDIUM
    assignee_ids: frozenset[str] = frozenset()
    due_date: date | None = None
    subtasks: list[SubtaskInput] = []

    @field_validator("project_id")
    @classmethod
    def validate_project_id(cls, v: str) -> str:
        return validate_identifier(v)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return validate_required_text(v, "Task title")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        return validate_optional_text(v)

    @field_validator("assignee_ids")
    @classmethod
    def validate_assignees(cls, v: frozenset[str]) -> frozenset[str]:
        return validate_identifiers(v)

    @field_validator("due_date", mode="before")
    @classmethod
    def validate_due_date(cls, v: object) -> object:
        return None if v == "" else v


class TaskUpdate(BaseModel):
    """Partial task update.

    Touching only ``status`` or subtask completion flags is a status-only
    change; anything else is structural.
    """

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, min_length=1, max_length=MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=MAX_DESCRIPTION_LENGTH)
    status: TaskStatus | None = None
    priority: Priority | None = None
    assignee_ids: frozenset[str] | None = None
    due_date: date | None = None
    subtasks: list[SubtaskInput] | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        if v is not None:
            return validate_required_text(v, "Task title")
        return v

    @field_validator("assignee_ids")
    @classmethod
    def validate_assignees(cls, v: frozenset[str] | None) -> frozenset[str] | None:
        return validate_identifiers(v) if v is not None else None

    @field_validator("due_date", mode="before")
    @classmethod
    def validate_due_date(cls, v: object) -> object:
        return None if v == "" else v
