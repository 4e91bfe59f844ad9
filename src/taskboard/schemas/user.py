from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from src.taskboard.core.config import get_settings
from src.taskboard.core.validators import (
    MAX_NAME_LENGTH,
    validate_identifier,
    validate_optional_text,
    validate_password_strength,
    validate_permissions,
    validate_required_text,
    validate_url,
)
from src.taskboard.models import (
    Language,
    LayoutDensity,
    Role,
    Theme,
    ThemeColor,
    UserStatus,
)


class UserCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(max_length=100)
    name: str = Field(min_length=1, max_length=MAX_NAME_LENGTH)
    role: Role = Role.USER
    company_id: str | None = None
    job_title: str | None = Field(default=None, max_length=MAX_NAME_LENGTH)
    permissions: frozenset[str] = frozenset()
    status: UserStatus = UserStatus.ACTIVE

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return validate_password_strength(v, get_settings().min_password_length)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return validate_required_text(v, "Name")

    @field_validator("company_id")
    @classmethod
    def validate_company_id(cls, v: str | None) -> str | None:
        v = validate_optional_text(v)
        return validate_identifier(v) if v is not None else None

    @field_validator("permissions")
    @classmethod
    def validate_permissions(cls, v: frozenset[str]) -> frozenset[str]:
        return validate_permissions(v)


class UserUpdate(BaseModel):
    """Administrative update; profile fields plus role/status/permissions/company."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=MAX_NAME_LENGTH)
    job_title: str | None = Field(default=None, max_length=MAX_NAME_LENGTH)
    avatar_url: str | None = None
    role: Role | None = None
    status: UserStatus | None = None
    company_id: str | None = None
    permissions: frozenset[str] | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is not None:
            return validate_required_text(v, "Name")
        return v

    @field_validator("avatar_url")
    @classmethod
    def validate_avatar_url(cls, v: str | None) -> str | None:
        v = validate_optional_text(v)
        return validate_url(v) if v is not None else None

    @field_validator("company_id")
    @classmethod
    def validate_company_id(cls, v: str | None) -> str | None:
        v = validate_optional_text(v)
        return validate_identifier(v) if v is not None else None

    @field_validator("permissions")
    @classmethod
    def validate_permissions(cls, v: frozenset[str] | None) -> frozenset[str] | None:
        return validate_permissions(v) if v is not None else None


class ProfileUpdate(BaseModel):
    """Self-service update of the signed-in user's own profile."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=MAX_NAME_LENGTH)
    job_title: str | None = Field(default=None, max_length=MAX_NAME_LENGTH)
    avatar_url: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is not None:
            return validate_required_text(v, "Name")
        return v

    @field_validator("avatar_url")
    @classmethod
    def validate_avatar_url(cls, v: str | None) -> str | None:
        v = validate_optional_text(v)
        return validate_url(v) if v is not None else None


class PreferencesUpdate(BaseModel):
    """Partial preferences; accepts the camelCase keys the web client sends."""

    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)

    theme: Theme | None = None
    primary_color: ThemeColor | None = None
    layout_density: LayoutDensity | None = None
    language: Language | None = None


class ProvisionUserRequest(BaseModel):
    """JSON body of the privileged user-provisioning function."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    email: str
    password: str
    full_name: str
    role: Role
    company_id: str | None = None
    job_title: str | None = None
    permissions: list[str] = []
    status: UserStatus = UserStatus.ACTIVE

    def to_body(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
