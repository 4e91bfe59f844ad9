"""Project, task and activity factories."""

from polyfactory import Use

from src.taskboard.models import (
    Attachment,
    Comment,
    Notification,
    NotificationType,
    Priority,
    Project,
    ProjectStatus,
    Task,
    TaskStatus,
)
from tests.factories.base import BaseFactory, new_id, utc_now


class ProjectFactory(BaseFactory[Project]):
    """Factory for generating Project test data.

    ``company_id`` and ``leader_id`` should normally be passed explicitly.
    """

    __model__ = Project

    id = Use(new_id)
    company_id = Use(new_id)
    name = "Test Project"
    description = ""
    leader_id = Use(new_id)
    status = ProjectStatus.ACTIVE
    priority = Priority.MEDIUM
    start_date = None
    due_date = None
    members = Use(frozenset)


class TaskFactory(BaseFactory[Task]):
    __model__ = Task

    id = Use(new_id)
    project_id = Use(new_id)
    creator_id = Use(new_id)
    title = "Test Task"
    description = None
    status = TaskStatus.TODO
    priority = Priority.MEDIUM
    assignee_ids = Use(frozenset)
    due_date = None
    subtasks = ()


class CommentFactory(BaseFactory[Comment]):
    __model__ = Comment

    id = Use(new_id)
    task_id = None
    project_id = None
    user_id = Use(new_id)
    content = "Looks good"
    created_at = Use(utc_now)


class AttachmentFactory(BaseFactory[Attachment]):
    __model__ = Attachment

    id = Use(new_id)
    task_id = None
    project_id = None
    user_id = Use(new_id)
    file_name = "plan.pdf"
    file_url = "https://files.example.com/plan.pdf"
    file_type = "application/pdf"
    size = 1024
    created_at = Use(utc_now)


class NotificationFactory(BaseFactory[Notification]):
    __model__ = Notification

    id = Use(new_id)
    user_id = Use(new_id)
    title = "Heads up"
    message = "Something happened"
    type = NotificationType.INFO
    read = False
    created_at = Use(utc_now)
    link = None

    @classmethod
    def already_read(cls, **kwargs):
        """Create an already-read notification."""
        return cls.build(read=True, **kwargs)
