"""Comments, attachments and notifications."""

from datetime import datetime

from pydantic import Field

from src.taskboard.models.base import EntityModel, utc_now
from src.taskboard.models.enums import NotificationType


class Comment(EntityModel):
    """Comment on exactly one task or one project. Content is immutable."""

    id: str
    task_id: str | None = None
    project_id: str | None = None
    user_id: str
    content: str
    created_at: datetime = Field(default_factory=utc_now)


class Attachment(EntityModel):
    id: str
    task_id: str | None = None
    project_id: str | None = None
    user_id: str
    file_name: str
    file_url: str
    file_type: str = "application/octet-stream"
    size: int = 0  # bytes
    created_at: datetime = Field(default_factory=utc_now)


class Notification(EntityModel):
    """System-generated message for one recipient.

    ``read`` only ever moves from False to True.
    """

    id: str
    user_id: str
    title: str
    message: str
    type: NotificationType = NotificationType.INFO
    read: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    link: str | None = None
