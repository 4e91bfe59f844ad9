"""Tests for row <-> record translation (src/taskboard/gateway/mappers.py)."""

from datetime import date

import pytest

from src.taskboard.core.exceptions import TransportError
from src.taskboard.gateway import from_row, record_to_row, to_row
from src.taskboard.models import (
    DEFAULT_PREFERENCES,
    Language,
    Priority,
    Project,
    Subtask,
    Task,
    Theme,
    User,
)
from tests.factories import ProjectFactory

pytestmark = pytest.mark.unit


class TestFromRow:
    def test_missing_optional_columns_get_defaults(self) -> None:
        user = from_row(
            User,
            {
                "id": "u1",
                "full_name": "Ana",
                "email": "ana@example.com",
                "role": "USER",
                "company_id": "c1",
                "permissions": None,
                "preferences": None,
            },
        )

        assert user.name == "Ana"
        assert user.company_id == "c1"
        assert user.permissions == frozenset()
        assert user.preferences == DEFAULT_PREFERENCES
        assert user.preferences.theme == Theme.SYSTEM
        assert user.preferences.language == Language.PT_BR

    def test_partial_preferences_are_completed(self) -> None:
        user = from_row(
            User,
            {
                "id": "u1",
                "full_name": "Ana",
                "email": "ana@example.com",
                "preferences": {"theme": "dark", "primaryColor": "neon"},
            },
        )

        assert user.preferences.theme == Theme.DARK
        # Unknown stored value falls back instead of breaking the load
        assert user.preferences.primary_color == DEFAULT_PREFERENCES.primary_color
        assert user.preferences.layout_density == DEFAULT_PREFERENCES.layout_density

    def test_missing_name_falls_back_to_email(self) -> None:
        user = from_row(User, {"id": "u1", "email": "bruno@example.com"})
        assert user.name == "bruno"

    def test_null_member_list_becomes_empty(self) -> None:
        project = from_row(
            Project,
            {"id": "p1", "company_id": "c1", "name": "P", "leader_id": "u1", "members": None},
        )
        assert project.members == frozenset()
        assert project.effective_members == frozenset({"u1"})

    def test_subtasks_are_read_from_camel_case_json(self) -> None:
        task = from_row(
            Task,
            {
                "id": "t1",
                "project_id": "p1",
                "creator_id": "u1",
                "title": "T",
                "assignee_ids": ["u2"],
                "subtasks": [
                    {"id": "s1", "title": "Sub", "status": True, "leaderId": "u2", "memberIds": []}
                ],
            },
        )

        assert task.subtasks[0].leader_id == "u2"
        assert task.subtasks[0].status is True

    def test_missing_required_column_is_a_transport_error(self) -> None:
        with pytest.raises(TransportError, match="projects"):
            from_row(Project, {"id": "p1", "name": "No company"})


class TestToRow:
    def test_renames_and_encodes(self) -> None:
        row = to_row(User, {"name": "Ana", "permissions": frozenset({"b", "a"})})
        assert row == {"full_name": "Ana", "permissions": ["a", "b"]}

    def test_record_to_row_is_full_record(self) -> None:
        project = ProjectFactory.build(
            priority=Priority.HIGH, start_date=date(2024, 1, 2), members=frozenset({"u2"})
        )
        row = record_to_row(project)

        assert row["priority"] == "high"
        assert row["start_date"] == "2024-01-02"
        assert row["members"] == ["u2"]
        assert set(row) == set(Project.model_fields)

    def test_embedded_documents_use_camel_case(self) -> None:
        subtask = Subtask(id="s1", title="Sub", leader_id="u2", member_ids=frozenset({"u3"}))
        row = to_row(Task, {"subtasks": (subtask,)})

        assert row["subtasks"] == [
            {"id": "s1", "title": "Sub", "status": False, "leaderId": "u2", "memberIds": ["u3"]}
        ]

    def test_round_trip_preserves_record(self) -> None:
        project = ProjectFactory.build(members=frozenset({"u2", "u3"}))
        assert from_row(Project, record_to_row(project)) == project
