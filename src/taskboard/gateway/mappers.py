"""Translation between remote rows and snapshot records.

Rows use the storage naming (``company_id``, ``full_name``) and may omit or
null any optional column. Records are strict: every default is injected
here, once, so no caller ever deals with a missing ``preferences`` or a
null member list.
"""

from collections.abc import Mapping
from datetime import date, datetime
from enum import Enum
from typing import Any, Final

from pydantic import BaseModel, ValidationError

from src.taskboard.core.exceptions import TransportError
from src.taskboard.gateway.protocols import Row, Table
from src.taskboard.models import (
    Attachment,
    Comment,
    Company,
    Notification,
    Project,
    Task,
    User,
)
from src.taskboard.models.base import EntityModel

TABLES: Final[dict[type[EntityModel], Table]] = {
    User: Table.MEMBERS,
    Company: Table.COMPANIES,
    Project: Table.PROJECTS,
    Task: Table.TASKS,
    Comment: Table.COMMENTS,
    Attachment: Table.ATTACHMENTS,
    Notification: Table.NOTIFICATIONS,
}

MODELS: Final[dict[Table, type[EntityModel]]] = {table: model for model, table in TABLES.items()}

# Record field -> column, where the two differ
_RENAMES: Final[dict[type[EntityModel], dict[str, str]]] = {
    User: {"name": "full_name"},
}


def _column(model: type[EntityModel], field: str) -> str:
    return _RENAMES.get(model, {}).get(field, field)


def encode_value(value: Any) -> Any:
    """Convert a record value into its JSON storage form."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime | date):
        return value.isoformat()
    if isinstance(value, frozenset | set):
        return sorted(encode_value(v) for v in value)
    if isinstance(value, list | tuple):
        return [encode_value(v) for v in value]
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    return value


def to_row(model: type[EntityModel], fields: Mapping[str, Any]) -> Row:
    """Map record fields (full or partial) to storage columns."""
    return {_column(model, name): encode_value(value) for name, value in fields.items()}


def record_to_row(record: EntityModel) -> Row:
    """Full-record write form, used for last-write-wins updates."""
    model = type(record)
    return to_row(model, {name: getattr(record, name) for name in model.model_fields})


def from_row[M: EntityModel](model: type[M], row: Row) -> M:
    """Build a record from a row, injecting defaults for absent/null columns.

    Raises:
        TransportError: If a required column is missing or malformed.
    """
    data: dict[str, Any] = {}
    for name in model.model_fields:
        value = row.get(_column(model, name))
        if value is not None:
            data[name] = value

    if model is User and "name" not in data and "email" in data:
        # Profiles created by the identity provider may lack a display name
        data["name"] = str(data["email"]).split("@", 1)[0]

    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise TransportError(
            f"Malformed {TABLES[model].value} row {row.get('id')!r}: {e.error_count()} errors"
        ) from e


def rows_to_records[M: EntityModel](model: type[M], rows: list[Row]) -> list[M]:
    return [from_row(model, row) for row in rows]
