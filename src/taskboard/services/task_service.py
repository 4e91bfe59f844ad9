"""Task actions.

Structural edits (title, assignees, the subtask set...) need the full edit
verdict. Moving the task status or ticking subtasks only needs the
status-mutation verdict, which assignees and subtask people also hold.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from src.taskboard.authz import Action, Verdict, require
from src.taskboard.core.exceptions import NotFoundError, PayloadValidationError
from src.taskboard.gateway import Table, from_row, record_to_row, to_row
from src.taskboard.models import (
    Attachment,
    Comment,
    Project,
    Subtask,
    Task,
    TaskStatus,
    User,
    new_id,
)
from src.taskboard.schemas import TaskCreate, TaskUpdate
from src.taskboard.services.base import ActionResult, BaseService, parse_payload
from src.taskboard.store.views import get_project, get_task_record

STATUS_FIELDS = frozenset({"status"})


def task_link(task: Task) -> str:
    return f"/projects/{task.project_id}?task={task.id}"


def _subtask_shape(subtasks: Iterable[Subtask]) -> list[tuple]:
    """Everything about the subtask list except completion flags."""
    return [(st.id, st.title, st.leader_id, st.member_ids) for st in subtasks]


def effective_changes(task: Task, changes: Mapping[str, Any]) -> dict[str, Any]:
    """Drop the keys whose value already matches the stored task."""
    return {name: value for name, value in changes.items() if getattr(task, name) != value}


def is_structural_change(task: Task, changes: Mapping[str, Any]) -> bool:
    """True if ``changes`` touch more than status and subtask completion."""
    changes = effective_changes(task, changes)
    if set(changes) - STATUS_FIELDS - {"subtasks"}:
        return True
    if "subtasks" in changes:
        return _subtask_shape(changes["subtasks"]) != _subtask_shape(task.subtasks)
    return False


class TaskService(BaseService):
    def _load(self, task_id: str) -> tuple[Task, Project]:
        task = get_task_record(self.snapshot, task_id)
        return task, get_project(self.snapshot, task.project_id)

    def _check_assignments(
        self,
        project: Project,
        assignee_ids: frozenset[str],
        subtasks: Iterable[Subtask],
        previous: frozenset[str] = frozenset(),
    ) -> None:
        """Assignees come from the project; subtask people come from the assignees."""
        outsiders = assignee_ids - project.effective_members
        if outsiders:
            raise PayloadValidationError(
                f"Assignees must be project members: {', '.join(sorted(outsiders))}",
                fields=["assignee_ids"],
            )
        for user_id in assignee_ids - previous:
            user = self.snapshot.users.get(user_id)
            if user is not None and user.is_suspended:
                raise PayloadValidationError(
                    f"{user.name} is suspended and cannot be assigned", fields=["assignee_ids"]
                )
        for subtask in subtasks:
            if not subtask.people <= assignee_ids:
                raise PayloadValidationError(
                    f"Subtask '{subtask.title}' people must be task assignees",
                    fields=["subtasks"],
                )

    async def _notify_assignees(self, actor: User, task: Task, user_ids: Iterable[str]) -> None:
        await self._notify(
            actor,
            user_ids,
            "New task assigned",
            f"You were assigned to the task {task.title}",
            link=task_link(task),
        )

    def _reflect(self, task: Task, row: dict | None, changes: Mapping[str, Any]) -> Task:
        saved = from_row(Task, row) if row else task.model_copy(update=dict(changes))
        self.snapshot.upsert(saved)
        return saved

    async def create_task(self, data: TaskCreate | Mapping[str, Any]) -> ActionResult[Task]:
        async def operation(actor: User) -> Task:
            payload = parse_payload(TaskCreate, data)
            project = get_project(self.snapshot, payload.project_id)
            fields = payload.model_dump(exclude={"subtasks"})
            fields["creator_id"] = actor.id
            fields["subtasks"] = tuple(st.to_subtask() for st in payload.subtasks)
            draft = Task(id=new_id(), **fields)
            require(actor, draft, Action.CREATE, project=project)
            self._check_assignments(project, draft.assignee_ids, draft.subtasks)

            row = await self.gateway.insert(Table.TASKS, to_row(Task, fields))
            task = from_row(Task, row)
            self.snapshot.upsert(task)

            await self._notify_assignees(actor, task, task.assignee_ids)
            return task

        return await self._execute(
            "create_task", operation, success=lambda t: f"Task {t.title} created"
        )

    async def update_task(
        self, task_id: str, data: TaskUpdate | Mapping[str, Any]
    ) -> ActionResult[Task]:
        """Structural edits write the full merged record, so concurrent edits
        resolve last-write-wins. Status-only edits write just the changed fields.
        """

        async def operation(actor: User) -> Task:
            task, project = self._load(task_id)
            payload = parse_payload(TaskUpdate, data)
            changes = payload.model_dump(exclude_unset=True, exclude={"subtasks"})
            if payload.subtasks is not None:
                changes["subtasks"] = tuple(st.to_subtask() for st in payload.subtasks)
            changes = effective_changes(task, changes)
            if not changes:
                return task

            merged = task.model_copy(update=changes)
            structural = is_structural_change(task, changes)
            if structural:
                require(actor, task, Action.EDIT, project=project)
                self._check_assignments(
                    project, merged.assignee_ids, merged.subtasks, previous=task.assignee_ids
                )
            else:
                require(
                    actor,
                    task,
                    Action.MUTATE_STATUS,
                    minimum=Verdict.ALLOW_STATUS_ONLY,
                    project=project,
                )

            values = record_to_row(merged) if structural else to_row(Task, changes)
            row = await self.gateway.update(Table.TASKS, task.id, values)
            saved = self._reflect(task, row, changes)
            await self._notify_assignees(actor, saved, saved.assignee_ids - task.assignee_ids)
            return saved

        return await self._execute(
            "update_task", operation, success="Task updated", task_id=task_id
        )

    async def set_task_status(self, task_id: str, status: TaskStatus | str) -> ActionResult[Task]:
        async def operation(actor: User) -> Task:
            task, project = self._load(task_id)
            require(
                actor, task, Action.MUTATE_STATUS, minimum=Verdict.ALLOW_STATUS_ONLY, project=project
            )
            try:
                new_status = TaskStatus(status)
            except ValueError as e:
                raise PayloadValidationError(
                    f"Unknown task status {status!r}", fields=["status"]
                ) from e
            if new_status == task.status:
                return task

            changes = {"status": new_status}
            row = await self.gateway.update(Table.TASKS, task.id, to_row(Task, changes))
            return self._reflect(task, row, changes)

        return await self._execute(
            "set_task_status", operation, success="Task status updated", task_id=task_id
        )

    async def toggle_subtask(self, task_id: str, subtask_id: str) -> ActionResult[Task]:
        """Flip one subtask's done flag."""

        async def operation(actor: User) -> Task:
            task, project = self._load(task_id)
            require(
                actor, task, Action.MUTATE_STATUS, minimum=Verdict.ALLOW_STATUS_ONLY, project=project
            )
            if task.subtask(subtask_id) is None:
                raise NotFoundError(f"Subtask {subtask_id} not found on task {task_id}")

            subtasks = tuple(
                st.model_copy(update={"status": not st.status}) if st.id == subtask_id else st
                for st in task.subtasks
            )
            changes = {"subtasks": subtasks}
            row = await self.gateway.update(Table.TASKS, task.id, to_row(Task, changes))
            return self._reflect(task, row, changes)

        return await self._execute(
            "toggle_subtask", operation, success="Subtask updated", task_id=task_id
        )

    async def delete_task(self, task_id: str) -> ActionResult[None]:
        async def operation(actor: User) -> None:
            task, project = self._load(task_id)
            require(actor, task, Action.DELETE, project=project)

            await self.gateway.delete(Table.TASKS, task_id)

            for model in (Comment, Attachment):
                for record in list(self.snapshot.collection(model).values()):
                    if record.task_id == task_id:
                        self.snapshot.remove(model, record.id)
            self.snapshot.remove(Task, task_id)

        return await self._execute(
            "delete_task", operation, success="Task deleted", task_id=task_id
        )

