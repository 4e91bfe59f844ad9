from collections.abc import Mapping
from typing import Any

from src.taskboard.authz import Action, require
from src.taskboard.core.exceptions import NotFoundError
from src.taskboard.gateway import Table, from_row, to_row
from src.taskboard.models import Comment, User, new_id
from src.taskboard.schemas import CommentCreate
from src.taskboard.services.base import ActionResult, BaseService, parse_payload
from src.taskboard.store.views import resolve_parent


class CommentService(BaseService):
    """Comments are append-only; there is no edit action."""

    async def add_comment(self, data: CommentCreate | Mapping[str, Any]) -> ActionResult[Comment]:
        async def operation(actor: User) -> Comment:
            payload = parse_payload(CommentCreate, data)
            project, task = resolve_parent(
                self.snapshot, task_id=payload.task_id, project_id=payload.project_id
            )
            values = {**payload.model_dump(), "user_id": actor.id}
            require(actor, Comment(id=new_id(), **values), Action.CREATE, project=project, task=task)

            row = await self.gateway.insert(Table.COMMENTS, to_row(Comment, values))
            comment = from_row(Comment, row)
            self.snapshot.upsert(comment)
            return comment

        return await self._execute("add_comment", operation, success="Comment added")

    async def delete_comment(self, comment_id: str) -> ActionResult[None]:
        async def operation(actor: User) -> None:
            comment = self.snapshot.comments.get(comment_id)
            if comment is None:
                raise NotFoundError(f"Comment {comment_id} not found")
            project, task = resolve_parent(
                self.snapshot, task_id=comment.task_id, project_id=comment.project_id
            )
            require(actor, comment, Action.DELETE, project=project, task=task)

            await self.gateway.delete(Table.COMMENTS, comment_id)
            self.snapshot.remove(Comment, comment_id)

        return await self._execute(
            "delete_comment", operation, success="Comment deleted", comment_id=comment_id
        )
