"""Project record - company-scoped entity."""

from datetime import date

from pydantic import Field

from src.taskboard.models.base import EntityModel
from src.taskboard.models.enums import Priority, ProjectStatus


class Project(EntityModel):
    """Project owned by a company.

    Note: ``company_id`` is fixed at creation; update payloads cannot carry it.
    """

    id: str
    company_id: str
    name: str
    description: str = ""
    leader_id: str
    status: ProjectStatus = ProjectStatus.ACTIVE
    priority: Priority = Priority.MEDIUM
    start_date: date | None = None
    due_date: date | None = None
    members: frozenset[str] = Field(default_factory=frozenset)

    @property
    def effective_members(self) -> frozenset[str]:
        """Members for access purposes: the leader always counts."""
        return self.members | {self.leader_id}

    def has_member(self, user_id: str) -> bool:
        return user_id in self.effective_members
