from src.taskboard.schemas.activity import (
    AttachmentCreate,
    CommentCreate,
    NotificationCreate,
)
from src.taskboard.schemas.company import CompanyCreate, CompanyUpdate
from src.taskboard.schemas.project import ProjectCreate, ProjectUpdate
from src.taskboard.schemas.task import SubtaskInput, TaskCreate, TaskUpdate
from src.taskboard.schemas.user import (
    PreferencesUpdate,
    ProfileUpdate,
    ProvisionUserRequest,
    UserCreate,
    UserUpdate,
)

__all__ = [
    "AttachmentCreate",
    "CommentCreate",
    "CompanyCreate",
    "CompanyUpdate",
    "NotificationCreate",
    "PreferencesUpdate",
    "ProfileUpdate",
    "ProjectCreate",
    "ProjectUpdate",
    "ProvisionUserRequest",
    "SubtaskInput",
    "TaskCreate",
    "TaskUpdate",
    "UserCreate",
    "UserUpdate",
]
