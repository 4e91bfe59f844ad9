from datetime import date

from pydantic import Field

from src.taskboard.models.base import EmbeddedModel, EntityModel
from src.taskboard.models.enums import Priority, TaskStatus


class Subtask(EmbeddedModel):
    """Checklist item stored inside its task row."""

    id: str
    title: str
    status: bool = False  # True = done
    leader_id: str | None = None
    member_ids: frozenset[str] = Field(default_factory=frozenset)

    @property
    def people(self) -> frozenset[str]:
        if self.leader_id:
            return self.member_ids | {self.leader_id}
        return self.member_ids


class Task(EntityModel):
    id: str
    project_id: str
    creator_id: str
    title: str
    description: str | None = None
    status: TaskStatus = TaskStatus.TODO
    priority: Priority = Priority.MEDIUM
    assignee_ids: frozenset[str] = Field(default_factory=frozenset)
    due_date: date | None = None
    subtasks: tuple[Subtask, ...] = ()

    def subtask(self, subtask_id: str) -> Subtask | None:
        return next((st for st in self.subtasks if st.id == subtask_id), None)
