"""Tests for payload schemas and the payload validation boundary."""

from datetime import date

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from pydantic import ValidationError

from src.taskboard.core.exceptions import PayloadValidationError
from src.taskboard.core.validators import validate_identifier
from src.taskboard.schemas import (
    AttachmentCreate,
    CommentCreate,
    CompanyCreate,
    CompanyUpdate,
    PreferencesUpdate,
    ProjectCreate,
    ProjectUpdate,
    ProvisionUserRequest,
    TaskCreate,
    UserCreate,
)
from src.taskboard.services import parse_payload

pytestmark = pytest.mark.unit


class TestCompanySchemas:
    def test_blank_admin_means_no_admin(self) -> None:
        company = CompanyCreate(name="  Acme  ", admin_id="")
        assert company.name == "Acme"
        assert company.admin_id is None

    def test_whitespace_name_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CompanyCreate(name="   ")

    def test_update_tracks_only_set_fields(self) -> None:
        update = CompanyUpdate(admin_id="u1")
        assert update.model_dump(exclude_unset=True) == {"admin_id": "u1"}


class TestUserCreate:
    def test_valid_payload(self) -> None:
        payload = UserCreate(
            email="new@example.com",
            password="long-enough",
            name="New Person",
            permissions=frozenset({"create_project"}),
        )
        assert payload.email == "new@example.com"

    def test_bad_email_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            UserCreate(email="not-an-email", password="long-enough", name="X")
        assert any(error["loc"] == ("email",) for error in exc_info.value.errors())

    def test_short_password_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            UserCreate(email="a@example.com", password="short", name="X")
        assert any(error["loc"] == ("password",) for error in exc_info.value.errors())

    def test_unknown_permission_rejected(self) -> None:
        with pytest.raises(ValidationError):
            UserCreate(
                email="a@example.com",
                password="long-enough",
                name="X",
                permissions=frozenset({"launch_missiles"}),
            )

    def test_provision_body_uses_camel_case(self) -> None:
        body = ProvisionUserRequest(
            email="a@example.com",
            password="long-enough",
            full_name="A",
            role="ADMIN",
            company_id="c1",
        ).to_body()

        assert body["fullName"] == "A"
        assert body["companyId"] == "c1"
        assert body["role"] == "ADMIN"
        assert body["status"] == "active"


class TestPreferencesUpdate:
    def test_accepts_camel_case_keys(self) -> None:
        update = PreferencesUpdate.model_validate({"primaryColor": "rose", "theme": "dark"})
        assert update.model_dump(exclude_unset=True) == {"primary_color": "rose", "theme": "dark"}

    def test_rejects_unknown_choice(self) -> None:
        with pytest.raises(ValidationError):
            PreferencesUpdate.model_validate({"language": "fr-FR"})


class TestProjectSchemas:
    def test_due_before_start_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Due date"):
            ProjectCreate(
                company_id="c1",
                name="P",
                leader_id="u1",
                start_date=date(2024, 5, 1),
                due_date=date(2024, 4, 1),
            )

    def test_blank_dates_become_none(self) -> None:
        project = ProjectCreate(company_id="c1", name="P", leader_id="u1", start_date="")
        assert project.start_date is None

    def test_company_cannot_be_changed(self) -> None:
        with pytest.raises(ValidationError):
            ProjectUpdate.model_validate({"company_id": "c2"})


class TestActivitySchemas:
    def test_comment_needs_exactly_one_parent(self) -> None:
        with pytest.raises(ValidationError, match="Exactly one"):
            CommentCreate(content="hi")
        with pytest.raises(ValidationError, match="Exactly one"):
            CommentCreate(content="hi", task_id="t1", project_id="p1")

    def test_attachment_size_must_be_numeric(self) -> None:
        with pytest.raises(ValidationError):
            AttachmentCreate(
                task_id="t1",
                file_name="a.pdf",
                file_url="https://files.example.com/a.pdf",
                size="12",
            )

    def test_attachment_size_limit(self) -> None:
        with pytest.raises(ValidationError, match="byte limit"):
            AttachmentCreate(
                task_id="t1",
                file_name="a.pdf",
                file_url="https://files.example.com/a.pdf",
                size=10**12,
            )

    def test_attachment_file_name_cannot_be_a_path(self) -> None:
        with pytest.raises(ValidationError, match="path separators"):
            AttachmentCreate(
                task_id="t1",
                file_name="../etc/passwd",
                file_url="https://files.example.com/a",
                size=1,
            )


class TestParsePayload:
    def test_converts_validation_errors(self) -> None:
        with pytest.raises(PayloadValidationError) as exc_info:
            parse_payload(TaskCreate, {"project_id": "p1", "title": " "})
        assert exc_info.value.fields == ["title"]
        assert "title" in exc_info.value.user_message

    def test_passes_through_schema_instances(self) -> None:
        payload = TaskCreate(project_id="p1", title="T")
        assert parse_payload(TaskCreate, payload) is payload


@given(value=st.from_regex(r"^[A-Za-z0-9][A-Za-z0-9_-]{0,40}$", fullmatch=True))
@settings(max_examples=100)
def test_valid_identifiers_accepted(value: str):
    assert validate_identifier(value) == value


@given(value=st.text(min_size=1).filter(lambda s: not s[0].isascii() or not s[0].isalnum()))
@settings(max_examples=100)
def test_identifiers_must_start_alphanumeric(value: str):
    with pytest.raises(ValueError):
        validate_identifier(value)
