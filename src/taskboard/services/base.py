"""Shared mutation-action plumbing.

Every action follows the same template, implemented once in
``BaseService._execute``:

1. require a READY session,
2. authorize and validate (inside the operation, before any network call),
3. write through the gateway,
4. reflect the confirmed result into the snapshot,
5. emit feedback and return an ``ActionResult``.

Errors never escape an action; they become a failed result plus an error
feedback signal. No action retries.
"""

from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ValidationError

from src.taskboard.core.exceptions import (
    AuthError,
    PayloadValidationError,
    TaskboardError,
    TransportError,
)
from src.taskboard.core.logging import get_logger
from src.taskboard.gateway import RemoteDataGateway, Table, UserProvisioner, to_row
from src.taskboard.models import Notification, NotificationType, User
from src.taskboard.schemas import NotificationCreate
from src.taskboard.store.feedback import FeedbackChannel
from src.taskboard.store.snapshot import Snapshot

logger = get_logger(__name__)


@dataclass
class ActionContext:
    """Collaborators the store lends to its actions."""

    snapshot: Snapshot
    gateway: RemoteDataGateway
    feedback: FeedbackChannel
    provisioner: UserProvisioner | None = None

    def require_ready(self) -> User:
        if not self.snapshot.ready or self.snapshot.actor is None:
            raise AuthError("No active session")
        return self.snapshot.actor


@dataclass(frozen=True)
class ActionResult[T]:
    ok: bool
    value: T | None = None
    message: str | None = None
    error: TaskboardError | None = None

    @property
    def error_kind(self) -> str | None:
        return self.error.kind if self.error else None

    @classmethod
    def success(cls, value: T | None = None, message: str | None = None) -> "ActionResult[T]":
        return cls(ok=True, value=value, message=message)

    @classmethod
    def failure(cls, error: TaskboardError) -> "ActionResult[T]":
        return cls(ok=False, message=error.user_message, error=error)


def parse_payload[S: BaseModel](schema: type[S], data: S | Mapping[str, Any]) -> S:
    """Validate a payload, converting pydantic errors into PayloadValidationError."""
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        fields = [".".join(str(part) for part in err["loc"]) for err in e.errors()]
        reasons = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'payload'}: {err['msg']}"
            for err in e.errors()
        )
        raise PayloadValidationError(reasons, fields=fields) from e


class BaseService:
    """Base for the per-entity action groups."""

    def __init__(self, ctx: ActionContext):
        self.ctx = ctx

    @property
    def snapshot(self) -> Snapshot:
        return self.ctx.snapshot

    @property
    def gateway(self) -> RemoteDataGateway:
        return self.ctx.gateway

    async def _execute[T](
        self,
        name: str,
        operation: Callable[[User], Awaitable[T]],
        *,
        success: str | Callable[[T], str] | None = None,
        **log_context: Any,
    ) -> ActionResult[T]:
        try:
            actor = self.ctx.require_ready()
            value = await operation(actor)
        except TaskboardError as e:
            logger.info(
                "Mutation rejected",
                action=name,
                error_kind=e.kind,
                detail=e.detail,
                **log_context,
            )
            self.ctx.feedback.error(e.user_message, kind=e.kind)
            return ActionResult.failure(e)
        except Exception as e:
            logger.exception("Unexpected error in mutation", action=name, **log_context)
            error = TransportError(str(e))
            self.ctx.feedback.error(error.user_message, kind=error.kind)
            return ActionResult.failure(error)

        message = success(value) if callable(success) else success
        if message:
            self.ctx.feedback.success(message)
        logger.info("Mutation applied", action=name, **log_context)
        return ActionResult.success(value, message)

    async def _notify(
        self,
        actor: User,
        recipients: Iterable[str],
        title: str,
        message: str,
        *,
        type: NotificationType = NotificationType.INFO,
        link: str | None = None,
    ) -> int:
        """Emit system notifications as a side effect of a confirmed mutation.

        The actor never notifies themselves, so nothing is merged locally:
        recipients receive the row through their own realtime feed.
        Failures are logged and do not undo the primary mutation.

        Returns:
            Number of notifications written
        """
        sent = 0
        for user_id in sorted(set(recipients) - {actor.id}):
            try:
                payload = parse_payload(
                    NotificationCreate,
                    {
                        "user_id": user_id,
                        "title": title,
                        "message": message,
                        "type": type,
                        "link": link,
                    },
                )
                values = to_row(Notification, payload.model_dump())
                await self.gateway.insert(Table.NOTIFICATIONS, values)
                sent += 1
            except TaskboardError as e:
                logger.warning(
                    "Failed to send notification",
                    recipient=user_id,
                    title=title,
                    error_kind=e.kind,
                )
        return sent
