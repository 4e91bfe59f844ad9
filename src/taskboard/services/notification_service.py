from src.taskboard.authz import Action, decide, require
from src.taskboard.core.exceptions import NotFoundError
from src.taskboard.gateway import Table, from_row, to_row
from src.taskboard.models import Notification, User
from src.taskboard.services.base import ActionResult, BaseService


class NotificationService(BaseService):
    """Read-state transitions. ``read`` only ever moves from False to True."""

    async def mark_read(self, notification_id: str) -> ActionResult[Notification]:
        """Idempotent: marking an already-read notification makes no remote call."""

        async def operation(actor: User) -> Notification:
            notification = self.snapshot.notifications.get(notification_id)
            if notification is None:
                raise NotFoundError(f"Notification {notification_id} not found")
            require(actor, notification, Action.MARK_READ)
            if notification.read:
                return notification

            row = await self.gateway.update(
                Table.NOTIFICATIONS, notification_id, to_row(Notification, {"read": True})
            )
            saved = (
                from_row(Notification, row)
                if row
                else notification.model_copy(update={"read": True})
            )
            if not saved.read:
                saved = saved.model_copy(update={"read": True})
            self.snapshot.upsert(saved)
            return saved

        return await self._execute(
            "mark_read", operation, notification_id=notification_id
        )

    async def mark_all_read(self) -> ActionResult[int]:
        """Mark every unread notification of the actor; returns how many changed."""

        async def operation(actor: User) -> int:
            unread = [
                n
                for n in self.snapshot.notifications.values()
                if not n.read and decide(actor, n, Action.MARK_READ).allowed
            ]
            for notification in unread:
                await self.gateway.update(
                    Table.NOTIFICATIONS, notification.id, to_row(Notification, {"read": True})
                )
                self.snapshot.upsert(notification.model_copy(update={"read": True}))
            return len(unread)

        return await self._execute(
            "mark_all_read",
            operation,
            success=lambda count: "All notifications marked as read" if count else None,
        )
