"""Session snapshot - the store's in-memory cache of remote state."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from src.taskboard.models import (
    Attachment,
    Comment,
    Company,
    Notification,
    Project,
    Task,
    User,
)
from src.taskboard.models.base import EntityModel


class SessionPhase(str, Enum):
    """Store lifecycle: UNAUTHENTICATED -> LOADING -> READY -> UNAUTHENTICATED."""

    UNAUTHENTICATED = "unauthenticated"
    LOADING = "loading"
    READY = "ready"


_COLLECTIONS: dict[type[EntityModel], str] = {
    User: "users",
    Company: "companies",
    Project: "projects",
    Task: "tasks",
    Comment: "comments",
    Attachment: "attachments",
    Notification: "notifications",
}


@dataclass
class Snapshot:
    """Mutable snapshot, owned by SyncStore and written only by its actions.

    Collections are keyed by id. ``notifications`` keeps newest-first order.
    Every method is synchronous, so each call is atomic with respect to
    other coroutines on the event loop.
    """

    phase: SessionPhase = SessionPhase.UNAUTHENTICATED
    actor: User | None = None
    users: dict[str, User] = field(default_factory=dict)
    companies: dict[str, Company] = field(default_factory=dict)
    projects: dict[str, Project] = field(default_factory=dict)
    tasks: dict[str, Task] = field(default_factory=dict)
    comments: dict[str, Comment] = field(default_factory=dict)
    attachments: dict[str, Attachment] = field(default_factory=dict)
    notifications: dict[str, Notification] = field(default_factory=dict)
    load_error: str | None = None

    @property
    def loading(self) -> bool:
        return self.phase == SessionPhase.LOADING

    @property
    def ready(self) -> bool:
        return self.phase == SessionPhase.READY and self.actor is not None

    def collection[M: EntityModel](self, model: type[M]) -> dict[str, M]:
        return getattr(self, _COLLECTIONS[model])

    def _reset_collections(self) -> None:
        for name in _COLLECTIONS.values():
            setattr(self, name, {})

    def clear(self) -> None:
        """Back to UNAUTHENTICATED with nothing cached."""
        self._reset_collections()
        self.actor = None
        self.load_error = None
        self.phase = SessionPhase.UNAUTHENTICATED

    def begin_loading(self) -> None:
        self.clear()
        self.phase = SessionPhase.LOADING

    def load(self, actor: User, records: dict[type[EntityModel], list[Any]]) -> None:
        """Replace every collection at once and enter READY."""
        self._reset_collections()
        for model, items in records.items():
            setattr(self, _COLLECTIONS[model], {item.id: item for item in items})
        self.users.setdefault(actor.id, actor)
        self.actor = actor
        self.load_error = None
        self.phase = SessionPhase.READY

    def load_failed(self, reason: str) -> None:
        """READY with empty collections; ``load_error`` says why."""
        self.clear()
        self.load_error = reason
        self.phase = SessionPhase.READY

    def upsert(self, record: EntityModel) -> None:
        if isinstance(record, Notification) and record.id not in self.notifications:
            self.prepend_notification(record)
            return
        self.collection(type(record))[record.id] = record
        if isinstance(record, User) and self.actor is not None and record.id == self.actor.id:
            self.actor = record

    def remove(self, model: type[EntityModel], id: str) -> None:
        self.collection(model).pop(id, None)

    def prepend_notification(self, notification: Notification) -> bool:
        """Insert newest-first; an id already present is not inserted again.

        Returns:
            True if the notification was added, False if it was a duplicate
        """
        if notification.id in self.notifications:
            return False
        self.notifications = {notification.id: notification, **self.notifications}
        return True

    def view(self) -> "SnapshotView":
        """Point-in-time copy; later writes do not show through."""
        return SnapshotView(
            phase=self.phase,
            actor=self.actor,
            users=MappingProxyType(dict(self.users)),
            companies=MappingProxyType(dict(self.companies)),
            projects=MappingProxyType(dict(self.projects)),
            tasks=MappingProxyType(dict(self.tasks)),
            comments=MappingProxyType(dict(self.comments)),
            attachments=MappingProxyType(dict(self.attachments)),
            notifications=MappingProxyType(dict(self.notifications)),
            load_error=self.load_error,
        )


@dataclass(frozen=True)
class SnapshotView:
    """Read-only view handed to consumers."""

    phase: SessionPhase
    actor: User | None
    users: MappingProxyType[str, User]
    companies: MappingProxyType[str, Company]
    projects: MappingProxyType[str, Project]
    tasks: MappingProxyType[str, Task]
    comments: MappingProxyType[str, Comment]
    attachments: MappingProxyType[str, Attachment]
    notifications: MappingProxyType[str, Notification]
    load_error: str | None

    @property
    def loading(self) -> bool:
        return self.phase == SessionPhase.LOADING

    def dump(self) -> dict[str, Any]:
        """Plain, comparable copy of the whole view (used by tests and debugging)."""
        return {
            "phase": self.phase.value,
            "actor": self.actor.model_dump() if self.actor else None,
            "load_error": self.load_error,
            **{
                name: [record.model_dump() for record in getattr(self, name).values()]
                for name in _COLLECTIONS.values()
            },
        }
