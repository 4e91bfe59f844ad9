from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    """Return current UTC time as an aware datetime.

    The gateway serialises timestamps as ISO-8601 with offset, so snapshot
    timestamps stay timezone-aware to compare cleanly with fetched rows.
    """
    return datetime.now(UTC)


def new_id() -> str:
    """Generate an opaque identifier for locally constructed records."""
    return str(uuid4())


class EntityModel(BaseModel):
    """Base for snapshot records.

    Records are frozen: the store replaces them wholesale via ``model_copy``
    and readers can never mutate a record they were handed.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", use_enum_values=False)


class EmbeddedModel(BaseModel):
    """Base for JSON documents embedded in a row (preferences, subtasks).

    These are stored camelCased by the web client, so they round-trip with
    camelCase aliases while exposing snake_case attributes.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )
