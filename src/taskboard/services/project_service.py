"""Project actions: lifecycle, status, membership and leadership."""

from collections.abc import Iterable, Mapping
from typing import Any

from src.taskboard.authz import Action, Verdict, require
from src.taskboard.core.exceptions import NotFoundError, PayloadValidationError
from src.taskboard.gateway import Table, from_row, record_to_row, to_row
from src.taskboard.models import (
    Attachment,
    Comment,
    NotificationType,
    Project,
    ProjectStatus,
    Task,
    User,
    new_id,
)
from src.taskboard.schemas import ProjectCreate, ProjectUpdate
from src.taskboard.services.base import ActionResult, BaseService, parse_payload


def project_link(project_id: str) -> str:
    return f"/projects/{project_id}"


class ProjectService(BaseService):
    def _get(self, project_id: str) -> Project:
        project = self.snapshot.projects.get(project_id)
        if project is None:
            raise NotFoundError(f"Project {project_id} not found")
        return project

    def _check_candidates(self, company_id: str, user_ids: Iterable[str], field: str) -> None:
        """New leaders and members must be active users of the project's company."""
        for user_id in user_ids:
            user = self.snapshot.users.get(user_id)
            if user is None:
                raise PayloadValidationError(f"User {user_id} does not exist", fields=[field])
            if not user.is_master and user.company_id != company_id:
                raise PayloadValidationError(
                    f"{user.name} does not belong to the project's company", fields=[field]
                )
            if user.is_suspended:
                raise PayloadValidationError(
                    f"{user.name} is suspended and cannot be assigned", fields=[field]
                )

    async def _write(self, project: Project) -> Project:
        """Full-record write; the later of two concurrent writes wins."""
        row = await self.gateway.update(Table.PROJECTS, project.id, record_to_row(project))
        saved = from_row(Project, row) if row else project
        self.snapshot.upsert(saved)
        return saved

    async def _notify_membership(
        self, actor: User, project: Project, added: Iterable[str], removed: Iterable[str]
    ) -> None:
        await self._notify(
            actor,
            added,
            "Added to project",
            f"You were added to the project {project.name}",
            link=project_link(project.id),
        )
        await self._notify(
            actor,
            removed,
            "Removed from project",
            f"You were removed from the project {project.name}",
            type=NotificationType.WARNING,
        )

    async def create_project(
        self, data: ProjectCreate | Mapping[str, Any]
    ) -> ActionResult[Project]:
        async def operation(actor: User) -> Project:
            payload = parse_payload(ProjectCreate, data)
            require(actor, Project(id=new_id(), **payload.model_dump()), Action.CREATE)
            if payload.company_id not in self.snapshot.companies:
                raise PayloadValidationError(
                    "Selected company does not exist", fields=["company_id"]
                )
            self._check_candidates(payload.company_id, [payload.leader_id], "leader_id")
            self._check_candidates(payload.company_id, payload.members, "members")

            row = await self.gateway.insert(Table.PROJECTS, to_row(Project, payload.model_dump()))
            project = from_row(Project, row)
            self.snapshot.upsert(project)

            await self._notify_membership(actor, project, project.effective_members, ())
            return project

        return await self._execute(
            "create_project", operation, success=lambda p: f"Project {p.name} created"
        )

    async def update_project(
        self, project_id: str, data: ProjectUpdate | Mapping[str, Any]
    ) -> ActionResult[Project]:
        async def operation(actor: User) -> Project:
            project = self._get(project_id)
            require(actor, project, Action.EDIT)
            payload = parse_payload(ProjectUpdate, data)
            changes = payload.model_dump(exclude_unset=True)
            if not changes:
                return project

            merged = project.model_copy(update=changes)
            if merged.start_date and merged.due_date and merged.due_date < merged.start_date:
                raise PayloadValidationError(
                    "Due date cannot be before the start date", fields=["due_date"]
                )
            added = merged.members - project.members
            removed = project.members - merged.members - {project.leader_id}
            self._check_candidates(project.company_id, added, "members")

            saved = await self._write(merged)
            await self._notify_membership(actor, saved, added, removed)
            return saved

        return await self._execute(
            "update_project", operation, success="Project updated", project_id=project_id
        )

    async def set_project_status(
        self, project_id: str, status: ProjectStatus | str
    ) -> ActionResult[Project]:
        """Only needs the status-mutation verdict, so plain members may use it."""

        async def operation(actor: User) -> Project:
            project = self._get(project_id)
            require(actor, project, Action.MUTATE_STATUS, minimum=Verdict.ALLOW_STATUS_ONLY)
            try:
                new_status = ProjectStatus(status)
            except ValueError as e:
                raise PayloadValidationError(
                    f"Unknown project status {status!r}", fields=["status"]
                ) from e
            if new_status == project.status:
                return project

            row = await self.gateway.update(
                Table.PROJECTS, project.id, to_row(Project, {"status": new_status})
            )
            saved = from_row(Project, row) if row else project.model_copy(update={"status": new_status})
            self.snapshot.upsert(saved)
            return saved

        return await self._execute(
            "set_project_status", operation, success="Project status updated", project_id=project_id
        )

    async def add_member(self, project_id: str, user_id: str) -> ActionResult[Project]:
        async def operation(actor: User) -> Project:
            project = self._get(project_id)
            require(actor, project, Action.MANAGE_MEMBERS)
            if project.has_member(user_id):
                return project
            self._check_candidates(project.company_id, [user_id], "user_id")

            saved = await self._write(project.model_copy(update={"members": project.members | {user_id}}))
            await self._notify_membership(actor, saved, [user_id], ())
            return saved

        return await self._execute(
            "add_member",
            operation,
            success="Member added",
            project_id=project_id,
            member_id=user_id,
        )

    async def remove_member(self, project_id: str, user_id: str) -> ActionResult[Project]:
        async def operation(actor: User) -> Project:
            project = self._get(project_id)
            require(actor, project, Action.MANAGE_MEMBERS)
            if user_id == project.leader_id:
                raise PayloadValidationError(
                    "The project leader cannot be removed; assign a new leader first",
                    fields=["user_id"],
                )
            if user_id not in project.members:
                return project

            saved = await self._write(project.model_copy(update={"members": project.members - {user_id}}))
            await self._notify_membership(actor, saved, (), [user_id])
            return saved

        return await self._execute(
            "remove_member",
            operation,
            success="Member removed",
            project_id=project_id,
            member_id=user_id,
        )

    async def assign_project_leader(self, project_id: str, user_id: str) -> ActionResult[Project]:
        async def operation(actor: User) -> Project:
            project = self._get(project_id)
            require(actor, project, Action.ASSIGN_LEADER)
            if user_id == project.leader_id:
                return project
            self._check_candidates(project.company_id, [user_id], "leader_id")

            # The outgoing leader stays on the project as a regular member
            members = project.members | {project.leader_id}
            saved = await self._write(
                project.model_copy(update={"leader_id": user_id, "members": members})
            )
            await self._notify(
                actor,
                [user_id],
                "Project leadership",
                f"You are now the leader of {saved.name}",
                link=project_link(saved.id),
            )
            return saved

        return await self._execute(
            "assign_project_leader",
            operation,
            success="Project leader assigned",
            project_id=project_id,
            leader_id=user_id,
        )

    async def delete_project(self, project_id: str) -> ActionResult[None]:
        """Delete a project; its tasks, comments and attachments go with it."""

        async def operation(actor: User) -> None:
            project = self._get(project_id)
            require(actor, project, Action.DELETE)

            await self.gateway.delete(Table.PROJECTS, project_id)

            task_ids = {t.id for t in self.snapshot.tasks.values() if t.project_id == project_id}
            for model in (Comment, Attachment):
                for record in list(self.snapshot.collection(model).values()):
                    if record.project_id == project_id or record.task_id in task_ids:
                        self.snapshot.remove(model, record.id)
            for task_id in task_ids:
                self.snapshot.remove(Task, task_id)
            self.snapshot.remove(Project, project_id)

        return await self._execute(
            "delete_project", operation, success="Project deleted", project_id=project_id
        )
