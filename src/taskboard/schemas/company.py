"""Company payload schemas."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.taskboard.core.validators import (
    MAX_DESCRIPTION_LENGTH,
    MAX_NAME_LENGTH,
    validate_identifier,
    validate_optional_text,
    validate_required_text,
    validate_url,
)


class CompanyCreate(BaseModel):
    """Schema for creating a company."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=MAX_DESCRIPTION_LENGTH)
    logo_url: str | None = None
    admin_id: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return validate_required_text(v, "Company name")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        return validate_optional_text(v)

    @field_validator("logo_url")
    @classmethod
    def validate_logo_url(cls, v: str | None) -> str | None:
        v = validate_optional_text(v)
        return validate_url(v) if v is not None else None

    @field_validator("admin_id")
    @classmethod
    def validate_admin_id(cls, v: str | None) -> str | None:
        # The web form submits "" for "no admin"
        v = validate_optional_text(v)
        return validate_identifier(v) if v is not None else None


class CompanyUpdate(CompanyCreate):
    """Schema for updating a company. Only fields that are set are written."""

    name: str | None = Field(default=None, min_length=1, max_length=MAX_NAME_LENGTH)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is not None:
            return validate_required_text(v, "Company name")
        return v
