"""Attachment metadata actions.

The file itself is uploaded to storage by the caller beforehand; these
actions only record or remove its metadata row.
"""

from collections.abc import Mapping
from typing import Any

from src.taskboard.authz import Action, require
from src.taskboard.core.exceptions import NotFoundError
from src.taskboard.gateway import Table, from_row, to_row
from src.taskboard.models import Attachment, User, new_id
from src.taskboard.schemas import AttachmentCreate
from src.taskboard.services.base import ActionResult, BaseService, parse_payload
from src.taskboard.store.views import resolve_parent


class AttachmentService(BaseService):
    async def add_attachment(
        self, data: AttachmentCreate | Mapping[str, Any]
    ) -> ActionResult[Attachment]:
        async def operation(actor: User) -> Attachment:
            payload = parse_payload(AttachmentCreate, data)
            project, task = resolve_parent(
                self.snapshot, task_id=payload.task_id, project_id=payload.project_id
            )
            values = {**payload.model_dump(), "user_id": actor.id}
            draft = Attachment(id=new_id(), **values)
            require(actor, draft, Action.CREATE, project=project, task=task)

            row = await self.gateway.insert(Table.ATTACHMENTS, to_row(Attachment, values))
            attachment = from_row(Attachment, row)
            self.snapshot.upsert(attachment)
            return attachment

        return await self._execute(
            "add_attachment", operation, success=lambda a: f"{a.file_name} attached"
        )

    async def delete_attachment(self, attachment_id: str) -> ActionResult[None]:
        """Allowed for the uploader, or whoever manages the parent task/project."""

        async def operation(actor: User) -> None:
            attachment = self.snapshot.attachments.get(attachment_id)
            if attachment is None:
                raise NotFoundError(f"Attachment {attachment_id} not found")
            project, task = resolve_parent(
                self.snapshot, task_id=attachment.task_id, project_id=attachment.project_id
            )
            require(actor, attachment, Action.DELETE, project=project, task=task)

            await self.gateway.delete(Table.ATTACHMENTS, attachment_id)
            self.snapshot.remove(Attachment, attachment_id)

        return await self._execute(
            "delete_attachment",
            operation,
            success="Attachment deleted",
            attachment_id=attachment_id,
        )
