"""Read-side filters over a snapshot.

Every filter goes through the authorization engine; none re-derives a
role or scope rule locally. They accept either the store's mutable
``Snapshot`` or a ``SnapshotView``.
"""

from typing import Any

from src.taskboard.authz import Action, decide, require
from src.taskboard.core.exceptions import NotFoundError
from src.taskboard.models import (
    Attachment,
    Comment,
    Company,
    Notification,
    Project,
    Task,
    User,
)


def get_project(snapshot: Any, project_id: str) -> Project:
    project = snapshot.projects.get(project_id)
    if project is None:
        raise NotFoundError(f"Project {project_id} not found")
    return project


def get_task_record(snapshot: Any, task_id: str) -> Task:
    task = snapshot.tasks.get(task_id)
    if task is None:
        raise NotFoundError(f"Task {task_id} not found")
    return task


def resolve_parent(
    snapshot: Any, *, task_id: str | None, project_id: str | None
) -> tuple[Project, Task | None]:
    """Project (and task, if any) a comment or attachment hangs off."""
    if task_id is not None:
        task = get_task_record(snapshot, task_id)
        return get_project(snapshot, task.project_id), task
    if project_id is None:
        raise NotFoundError("Record has no parent task or project")
    return get_project(snapshot, project_id), None


def visible_companies(snapshot: Any) -> list[Company]:
    actor = snapshot.actor
    return [c for c in snapshot.companies.values() if decide(actor, c, Action.VIEW).allowed]


def visible_users(snapshot: Any) -> list[User]:
    actor = snapshot.actor
    return [u for u in snapshot.users.values() if decide(actor, u, Action.VIEW).allowed]


def visible_projects(snapshot: Any) -> list[Project]:
    actor = snapshot.actor
    return [p for p in snapshot.projects.values() if decide(actor, p, Action.VIEW).allowed]


def open_project(snapshot: Any, project_id: str) -> Project:
    """Project for a detail screen; raises PermissionDeniedError outside scope."""
    project = get_project(snapshot, project_id)
    require(snapshot.actor, project, Action.VIEW)
    return project


def project_tasks(snapshot: Any, project_id: str) -> list[Task]:
    """Tasks of a project, after the project visibility check."""
    project = open_project(snapshot, project_id)
    return [t for t in snapshot.tasks.values() if t.project_id == project.id]


def open_task(snapshot: Any, task_id: str) -> Task:
    """Task for a detail screen.

    The parent project's visibility is checked before any task data leaves
    the snapshot.
    """
    task = get_task_record(snapshot, task_id)
    project = get_project(snapshot, task.project_id)
    require(snapshot.actor, task, Action.VIEW, project=project)
    return task


def comments_for(
    snapshot: Any, *, task_id: str | None = None, project_id: str | None = None
) -> list[Comment]:
    project, task = resolve_parent(snapshot, task_id=task_id, project_id=project_id)
    require(snapshot.actor, project, Action.VIEW)
    comments = [
        c
        for c in snapshot.comments.values()
        if (c.task_id == task.id if task else c.project_id == project.id)
    ]
    return sorted(comments, key=lambda c: c.created_at)


def attachments_for(
    snapshot: Any, *, task_id: str | None = None, project_id: str | None = None
) -> list[Attachment]:
    project, task = resolve_parent(snapshot, task_id=task_id, project_id=project_id)
    require(snapshot.actor, project, Action.VIEW)
    attachments = [
        a
        for a in snapshot.attachments.values()
        if (a.task_id == task.id if task else a.project_id == project.id)
    ]
    return sorted(attachments, key=lambda a: a.created_at, reverse=True)


def inbox(snapshot: Any, *, unread_only: bool = False) -> list[Notification]:
    """The actor's notifications, newest first."""
    actor = snapshot.actor
    return [
        n
        for n in snapshot.notifications.values()
        if decide(actor, n, Action.VIEW).allowed and not (unread_only and n.read)
    ]
