"""Mutation actions, grouped per entity.

Services are built by ``SyncStore`` around a shared ``ActionContext``;
callers reach them as ``store.projects``, ``store.tasks`` and so on.
"""

from src.taskboard.services.attachment_service import AttachmentService
from src.taskboard.services.base import ActionContext, ActionResult, BaseService, parse_payload
from src.taskboard.services.comment_service import CommentService
from src.taskboard.services.company_service import CompanyService
from src.taskboard.services.notification_service import NotificationService
from src.taskboard.services.project_service import ProjectService
from src.taskboard.services.task_service import TaskService, is_structural_change
from src.taskboard.services.user_service import DELETION_UNSUPPORTED_MESSAGE, UserService

__all__ = [
    "ActionContext",
    "ActionResult",
    "AttachmentService",
    "BaseService",
    "CommentService",
    "CompanyService",
    "DELETION_UNSUPPORTED_MESSAGE",
    "NotificationService",
    "ProjectService",
    "TaskService",
    "UserService",
    "is_structural_change",
    "parse_payload",
]
