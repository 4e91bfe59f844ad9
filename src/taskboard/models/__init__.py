"""Model exports.

Import from here: `from src.taskboard.models import User, Project`
"""

from src.taskboard.models.activity import Attachment, Comment, Notification
from src.taskboard.models.base import new_id, utc_now
from src.taskboard.models.company import Company
from src.taskboard.models.enums import (
    Language,
    LayoutDensity,
    NotificationType,
    Priority,
    ProjectStatus,
    Role,
    TaskStatus,
    Theme,
    ThemeColor,
    UserStatus,
)
from src.taskboard.models.project import Project
from src.taskboard.models.task import Subtask, Task
from src.taskboard.models.user import DEFAULT_PREFERENCES, User, UserPreferences

__all__ = [
    # Enums
    "Language",
    "LayoutDensity",
    "NotificationType",
    "Priority",
    "ProjectStatus",
    "Role",
    "TaskStatus",
    "Theme",
    "ThemeColor",
    "UserStatus",
    # Records
    "Attachment",
    "Comment",
    "Company",
    "Notification",
    "Project",
    "Subtask",
    "Task",
    "User",
    "UserPreferences",
    "DEFAULT_PREFERENCES",
    # Helpers
    "new_id",
    "utc_now",
]
