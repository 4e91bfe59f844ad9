"""User records and their embedded preferences."""

from typing import Any

from pydantic import Field, ValidationInfo, field_validator

from src.taskboard.models.base import EmbeddedModel, EntityModel
from src.taskboard.models.enums import (
    Language,
    LayoutDensity,
    Role,
    Theme,
    ThemeColor,
    UserStatus,
)


class UserPreferences(EmbeddedModel):
    """Per-user display preferences.

    Unknown or missing stored values fall back to the field default so a
    hand-edited row can never break a session load.
    """

    theme: Theme = Theme.SYSTEM
    primary_color: ThemeColor = ThemeColor.BLUE
    layout_density: LayoutDensity = LayoutDensity.COMFORTABLE
    language: Language = Language.PT_BR

    @field_validator("*", mode="before")
    @classmethod
    def fallback_to_default(cls, v: Any, info: ValidationInfo) -> Any:
        field = cls.model_fields[info.field_name]
        enum_type = field.annotation
        try:
            return enum_type(v)
        except ValueError:
            return field.default


DEFAULT_PREFERENCES = UserPreferences()


class User(EntityModel):
    id: str
    name: str
    email: str
    role: Role = Role.USER
    company_id: str | None = None
    status: UserStatus = UserStatus.ACTIVE
    permissions: frozenset[str] = Field(default_factory=frozenset)
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    job_title: str | None = None
    avatar_url: str | None = None

    @property
    def is_suspended(self) -> bool:
        return self.status == UserStatus.SUSPENDED

    @property
    def is_master(self) -> bool:
        return self.role == Role.MASTER

    def has_permission(self, capability: str) -> bool:
        return capability in self.permissions
