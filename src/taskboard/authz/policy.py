"""Authorization engine.

Pure decision procedure: ``decide(actor, resource, action)`` returns a
``Verdict`` and never touches the network or the snapshot. Resources that
are scoped through a parent (tasks, comments, attachments) take the parent
project, and optionally the parent task, as keyword arguments.

Rules are evaluated in precedence order, first match wins:

1. No actor: deny.
   (Self-protection: nobody may delete or suspend their own account.)
2. MASTER: allow everything.
3. Suspended actor: deny every mutating action.
4. Company: ADMIN of that company may view/edit/delete; USER may view it.
5. Project: visible to its company and to its members (leader included);
   managed by the company ADMIN or the project leader.
6. Task: edited by the company ADMIN, the project leader or the task
   creator; assignees get a status-only verdict.
7. Attachment deletion: the uploader or a manager of the parent.
8. User: self may edit profile fields; ADMIN of the same company may edit
   everything except MASTER accounts.
"""

from enum import Enum
from typing import Final

from src.taskboard.core.exceptions import PermissionDeniedError
from src.taskboard.models import (
    Attachment,
    Comment,
    Company,
    Notification,
    Project,
    Role,
    Task,
    User,
)


class Action(str, Enum):
    VIEW = "view"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"
    MANAGE_MEMBERS = "manage_members"
    ASSIGN_LEADER = "assign_leader"
    MUTATE_STATUS = "mutate_status"
    EDIT_PROFILE = "edit_profile"
    CHANGE_ROLE = "change_role"
    SUSPEND = "suspend"
    MARK_READ = "mark_read"


class Verdict(str, Enum):
    DENY = "deny"
    ALLOW_STATUS_ONLY = "allow-status-only"
    ALLOW_FULL = "allow-full"

    @property
    def allowed(self) -> bool:
        return self is not Verdict.DENY

    def satisfies(self, minimum: "Verdict") -> bool:
        return _VERDICT_RANK[self] >= _VERDICT_RANK[minimum]


_VERDICT_RANK: Final[dict[Verdict, int]] = {
    Verdict.DENY: 0,
    Verdict.ALLOW_STATUS_ONLY: 1,
    Verdict.ALLOW_FULL: 2,
}

READ_ACTIONS: Final[frozenset[Action]] = frozenset({Action.VIEW})
MUTATING_ACTIONS: Final[frozenset[Action]] = frozenset(Action) - READ_ACTIONS
SELF_PROTECTED_ACTIONS: Final[frozenset[Action]] = frozenset({Action.DELETE, Action.SUSPEND})

# Fields a user may change on their own record
PROFILE_FIELDS: Final[frozenset[str]] = frozenset(
    {"name", "job_title", "avatar_url", "preferences"}
)
# Fields only an administrator of the user's company may change
ADMIN_FIELDS: Final[frozenset[str]] = frozenset({"role", "status", "permissions", "company_id"})

type Resource = Company | Project | Task | Comment | Attachment | User | Notification

_ALLOW = Verdict.ALLOW_FULL
_DENY = Verdict.DENY


def _verdict(condition: bool) -> Verdict:
    return _ALLOW if condition else _DENY


def _same_company(actor: User, company_id: str | None) -> bool:
    return actor.company_id is not None and actor.company_id == company_id


def _is_company_admin(actor: User, company_id: str | None) -> bool:
    return actor.role == Role.ADMIN and _same_company(actor, company_id)


def can_view_project(actor: User, project: Project) -> bool:
    """Scope check shared by everything hanging off a project."""
    return _same_company(actor, project.company_id) or project.has_member(actor.id)


def can_manage_project(actor: User, project: Project) -> bool:
    return _is_company_admin(actor, project.company_id) or actor.id == project.leader_id


def _company_verdict(actor: User, company: Company, action: Action) -> Verdict:
    if action == Action.VIEW:
        return _verdict(_same_company(actor, company.id))
    if action in (Action.EDIT, Action.DELETE):
        return _verdict(_is_company_admin(actor, company.id))
    # Creating tenants is reserved for MASTER (handled by rule 2)
    return _DENY


def _project_verdict(actor: User, project: Project, action: Action) -> Verdict:
    match action:
        case Action.VIEW:
            return _verdict(can_view_project(actor, project))
        case Action.EDIT | Action.MANAGE_MEMBERS | Action.ASSIGN_LEADER:
            return _verdict(can_manage_project(actor, project))
        case Action.MUTATE_STATUS:
            if can_manage_project(actor, project):
                return _ALLOW
            if actor.id in project.members:
                return Verdict.ALLOW_STATUS_ONLY
            return _DENY
        case Action.CREATE:
            return _verdict(
                _same_company(actor, project.company_id)
                and (actor.role == Role.ADMIN or actor.has_permission("create_project"))
            )
        case Action.DELETE:
            return _verdict(
                _same_company(actor, project.company_id)
                and (actor.role == Role.ADMIN or actor.has_permission("delete_project"))
            )
    return _DENY


def _can_edit_task(actor: User, task: Task, project: Project) -> bool:
    return can_manage_project(actor, project) or actor.id == task.creator_id


def _task_verdict(actor: User, task: Task, project: Project, action: Action) -> Verdict:
    # Nothing about a task leaks past the project scope check
    if not can_view_project(actor, project):
        return _DENY
    match action:
        case Action.VIEW | Action.CREATE:
            return _ALLOW
        case Action.EDIT | Action.DELETE:
            return _verdict(_can_edit_task(actor, task, project))
        case Action.MUTATE_STATUS:
            if _can_edit_task(actor, task, project):
                return _ALLOW
            involved = task.assignee_ids.union(*(st.people for st in task.subtasks))
            if actor.id in involved:
                return Verdict.ALLOW_STATUS_ONLY
            return _DENY
    return _DENY


def _comment_verdict(
    actor: User, comment: Comment, project: Project, action: Action
) -> Verdict:
    if not can_view_project(actor, project):
        return _DENY
    match action:
        case Action.VIEW:
            return _ALLOW
        case Action.CREATE:
            return _verdict(comment.user_id == actor.id)
        case Action.DELETE:
            return _verdict(comment.user_id == actor.id or can_manage_project(actor, project))
    # Comment content is immutable
    return _DENY


def _attachment_verdict(
    actor: User,
    attachment: Attachment,
    project: Project,
    task: Task | None,
    action: Action,
) -> Verdict:
    if not can_view_project(actor, project):
        return _DENY
    match action:
        case Action.VIEW:
            return _ALLOW
        case Action.CREATE:
            return _verdict(attachment.user_id == actor.id)
        case Action.DELETE:
            if attachment.user_id == actor.id:
                return _ALLOW
            if task is not None:
                return _verdict(_can_edit_task(actor, task, project))
            return _verdict(can_manage_project(actor, project))
    return _DENY


def _user_verdict(actor: User, target: User, action: Action) -> Verdict:
    administers = (
        actor.role == Role.ADMIN
        and _same_company(actor, target.company_id)
        and target.role != Role.MASTER
    )
    match action:
        case Action.VIEW:
            return _verdict(actor.id == target.id or _same_company(actor, target.company_id))
        case Action.EDIT_PROFILE:
            return _verdict(actor.id == target.id or administers)
        case Action.EDIT | Action.CHANGE_ROLE | Action.SUSPEND | Action.DELETE:
            return _verdict(administers)
        case Action.CREATE:
            # Company is pinned to the admin's own by effective_company_id()
            return _verdict(actor.role == Role.ADMIN and target.role != Role.MASTER)
    return _DENY


def _notification_verdict(actor: User, notification: Notification, action: Action) -> Verdict:
    if action in (Action.VIEW, Action.MARK_READ):
        return _verdict(notification.user_id == actor.id)
    return _DENY


def decide(
    actor: User | None,
    resource: Resource,
    action: Action,
    *,
    project: Project | None = None,
    task: Task | None = None,
) -> Verdict:
    """Return the verdict for ``actor`` performing ``action`` on ``resource``.

    Args:
        actor: The authenticated user, or None when nobody is signed in
        resource: The target record (a draft record for CREATE)
        action: The operation being attempted
        project: Parent project; required for tasks, comments and attachments
        task: Parent task of a comment or attachment, when it hangs off one

    Raises:
        ValueError: If a scoped resource is passed without its project
        TypeError: If the resource type is unknown
    """
    if actor is None:
        return _DENY

    if (
        isinstance(resource, User)
        and resource.id == actor.id
        and action in SELF_PROTECTED_ACTIONS
    ):
        return _DENY

    if actor.role == Role.MASTER:
        return _ALLOW

    if actor.is_suspended and action in MUTATING_ACTIONS:
        return _DENY

    if isinstance(resource, Task | Comment | Attachment) and project is None:
        raise ValueError(f"{type(resource).__name__} verdicts need the parent project")

    match resource:
        case Company():
            return _company_verdict(actor, resource, action)
        case Project():
            return _project_verdict(actor, resource, action)
        case Task():
            return _task_verdict(actor, resource, project, action)
        case Comment():
            return _comment_verdict(actor, resource, project, action)
        case Attachment():
            return _attachment_verdict(actor, resource, project, task, action)
        case User():
            return _user_verdict(actor, resource, action)
        case Notification():
            return _notification_verdict(actor, resource, action)
    raise TypeError(f"No authorization rules for {type(resource).__name__}")


def require(
    actor: User | None,
    resource: Resource,
    action: Action,
    *,
    minimum: Verdict = Verdict.ALLOW_FULL,
    project: Project | None = None,
    task: Task | None = None,
) -> Verdict:
    """Like ``decide`` but raise PermissionDeniedError below ``minimum``."""
    verdict = decide(actor, resource, action, project=project, task=task)
    if not verdict.satisfies(minimum):
        raise PermissionDeniedError(
            f"{action.value} on {type(resource).__name__} {getattr(resource, 'id', '?')} denied"
        )
    return verdict


def can_establish_session(user: User | None) -> bool:
    """Suspended accounts are excluded from authentication, whatever their role."""
    return user is not None and not user.is_suspended


def can_grant_role(actor: User | None, role: Role) -> bool:
    """Only MASTER hands out MASTER; ADMIN may grant ADMIN or USER."""
    if actor is None:
        return False
    if actor.role == Role.MASTER:
        return True
    return actor.role == Role.ADMIN and not actor.is_suspended and role != Role.MASTER


def can_assign_company(actor: User | None, company_id: str | None) -> bool:
    """Only MASTER may place users in (or out of) a company other than its own."""
    if actor is None:
        return False
    if actor.role == Role.MASTER:
        return True
    return _same_company(actor, company_id)


def editable_user_fields(actor: User | None, target: User) -> frozenset[str]:
    """Fields of ``target`` the actor may change."""
    fields: frozenset[str] = frozenset()
    if decide(actor, target, Action.EDIT_PROFILE).allowed:
        fields |= PROFILE_FIELDS
    if decide(actor, target, Action.EDIT).allowed:
        fields |= ADMIN_FIELDS
    return fields


def effective_company_id(actor: User, requested: str | None) -> str | None:
    """Company a provisioned user lands in: an ADMIN always provisions into its own."""
    if actor.role == Role.ADMIN:
        return actor.company_id
    return requested
