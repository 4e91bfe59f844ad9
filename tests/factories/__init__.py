"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import UserFactory, ProjectFactory, ...
"""

from tests.factories.base import BaseFactory, new_id, utc_now
from tests.factories.project import (
    AttachmentFactory,
    CommentFactory,
    NotificationFactory,
    ProjectFactory,
    TaskFactory,
)
from tests.factories.user import CompanyFactory, UserFactory

__all__ = [
    # Base
    "BaseFactory",
    "new_id",
    "utc_now",
    # Tenancy
    "CompanyFactory",
    "UserFactory",
    # Work items
    "ProjectFactory",
    "TaskFactory",
    "CommentFactory",
    "AttachmentFactory",
    "NotificationFactory",
]
