"""Synchronized store: session lifecycle, bulk load and realtime merge.

The store is an explicit context object. It owns the snapshot, hands out a
read-only view of it, and lends the mutable snapshot only to its own
mutation actions (``store.projects.add_member(...)`` and friends).

Lifecycle::

    UNAUTHENTICATED --sign_in--> LOADING --ok/failure--> READY
          ^                                                |
          +------------------------sign_out----------------+

Every sign-in or sign-out bumps a generation counter; a load or a realtime
event belonging to an older generation is discarded.
"""

import asyncio

from src.taskboard.authz import can_establish_session
from src.taskboard.core.exceptions import AuthError, TaskboardError, TransportError
from src.taskboard.core.logging import bind_session_context, clear_session_context, get_logger
from src.taskboard.gateway import (
    TABLES,
    AuthSession,
    NotificationFeed,
    RemoteDataGateway,
    Row,
    Subscription,
    Table,
    UserProvisioner,
    from_row,
    rows_to_records,
)
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
from src.taskboard.services import (
    ActionContext,
    AttachmentService,
    CommentService,
    CompanyService,
    NotificationService,
    ProjectService,
    TaskService,
    UserService,
)
from src.taskboard.store.feedback import FeedbackChannel
from src.taskboard.store.snapshot import SessionPhase, Snapshot, SnapshotView

logger = get_logger(__name__)

# Collections fetched in parallel once the profile is known
BULK_MODELS: tuple[type[EntityModel], ...] = (
    User,
    Company,
    Project,
    Task,
    Comment,
    Attachment,
    Notification,
)


class SyncStore:
    """Session-scoped cache of remote state plus the actions that mutate it.

    Args:
        gateway: Remote data gateway (bound to the session on sign-in)
        provisioner: Privileged user-creation function, if available
        feed: Realtime notification feed; None disables live inserts
        feedback: Channel for transient status signals
    """

    def __init__(
        self,
        gateway: RemoteDataGateway,
        *,
        provisioner: UserProvisioner | None = None,
        feed: NotificationFeed | None = None,
        feedback: FeedbackChannel | None = None,
    ):
        self.gateway = gateway
        self.feed = feed
        self.feedback = feedback or FeedbackChannel()
        self._snapshot = Snapshot()
        self._generation = 0
        self._subscription: Subscription | None = None

        ctx = ActionContext(self._snapshot, gateway, self.feedback, provisioner)
        self.companies = CompanyService(ctx)
        self.users = UserService(ctx)
        self.projects = ProjectService(ctx)
        self.tasks = TaskService(ctx)
        self.comments = CommentService(ctx)
        self.attachments = AttachmentService(ctx)
        self.notifications = NotificationService(ctx)

    @property
    def state(self) -> SnapshotView:
        return self._snapshot.view()

    @property
    def phase(self) -> SessionPhase:
        return self._snapshot.phase

    @property
    def realtime_active(self) -> bool:
        return self._subscription is not None

    async def handle_session_change(self, session: AuthSession | None) -> None:
        """Entry point for identity-provider change events."""
        if session is None:
            await self.sign_out()
        else:
            await self.sign_in(session)

    async def reload(self) -> None:
        """Re-fetch everything for the current session."""
        session = self.gateway.current_session()
        if session is not None:
            await self.sign_in(session)

    async def sign_in(self, session: AuthSession) -> None:
        """Load the snapshot for ``session``; always ends in READY unless superseded."""
        await self._close_subscription()
        self._generation += 1
        generation = self._generation

        self.gateway.bind_session(session)
        self._snapshot.begin_loading()
        logger.info("Loading session", user_id=session.user_id)

        try:
            actor = await self._fetch_actor(session.user_id)
            records = await self._fetch_collections(actor)
        except TaskboardError as e:
            if self._is_stale(generation):
                return
            self._fail_load(e)
            return
        except Exception as e:
            if self._is_stale(generation):
                return
            logger.exception("Unexpected error while loading session", user_id=session.user_id)
            self._fail_load(TransportError(str(e)))
            return

        if self._is_stale(generation):
            logger.info("Discarding stale session load", user_id=session.user_id)
            return

        self._snapshot.load(actor, records)
        bind_session_context(actor.id, actor.company_id, actor.email)
        logger.info(
            "Session ready",
            **{TABLES[model].value: len(items) for model, items in records.items()},
        )
        await self._start_realtime(actor, generation)

    async def sign_out(self) -> None:
        was_authenticated = self._snapshot.phase != SessionPhase.UNAUTHENTICATED
        self._generation += 1
        await self._close_subscription()
        self.gateway.bind_session(None)
        self._snapshot.clear()
        clear_session_context()
        if was_authenticated:
            logger.info("Signed out")
            self.feedback.info("Logged out")

    async def close(self) -> None:
        """Tear down the realtime subscription without touching the snapshot."""
        await self._close_subscription()

    def _is_stale(self, generation: int) -> bool:
        return generation != self._generation

    async def _fetch_actor(self, user_id: str) -> User:
        actor = from_row(User, await self.gateway.select_by_id(Table.MEMBERS, user_id))
        if not can_establish_session(actor):
            self.gateway.bind_session(None)
            raise AuthError(
                f"Account {user_id} is suspended",
                user_message="This account is suspended. Contact your administrator.",
            )
        return actor

    async def _fetch_collections(self, actor: User) -> dict[type[EntityModel], list]:
        async def fetch(model: type[EntityModel]) -> list:
            if model is Notification:
                rows = await self.gateway.select_all(
                    Table.NOTIFICATIONS, order_by="created_at", descending=True
                )
                rows = [row for row in rows if row.get("user_id") == actor.id]
            else:
                rows = await self.gateway.select_all(TABLES[model])
            return rows_to_records(model, rows)

        results = await asyncio.gather(*(fetch(model) for model in BULK_MODELS))
        return dict(zip(BULK_MODELS, results, strict=True))

    def _fail_load(self, error: TaskboardError) -> None:
        logger.warning("Session load failed", error_kind=error.kind, detail=error.detail)
        self._snapshot.load_failed(error.user_message)
        self.feedback.error(f"Failed to load data: {error.user_message}", kind=error.kind)

    async def _start_realtime(self, actor: User, generation: int) -> None:
        if self.feed is None:
            return

        async def on_insert(row: Row) -> None:
            if not self._is_stale(generation):
                self._merge_notification(row)

        try:
            subscription = await self.feed.subscribe(actor.id, on_insert)
        except Exception:
            # Live inserts are optional; the session stays usable without them
            logger.exception("Realtime subscription failed", user_id=actor.id)
            return

        if self._is_stale(generation):
            await subscription.close()
            return
        self._subscription = subscription

    async def _close_subscription(self) -> None:
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            await subscription.close()

    def _merge_notification(self, row: Row) -> None:
        """Prepend an inserted notification addressed to the current actor.

        Events for other recipients are ignored, and an id already in the
        snapshot (from the bulk fetch or an earlier delivery) is dropped.
        """
        actor = self._snapshot.actor
        if not self._snapshot.ready or actor is None or row.get("user_id") != actor.id:
            return
        try:
            notification = from_row(Notification, row)
        except TransportError as e:
            logger.warning("Dropping malformed realtime notification", detail=e.detail)
            return

        if not self._snapshot.prepend_notification(notification):
            logger.debug("Duplicate realtime notification dropped", notification_id=notification.id)
            return
        self.feedback.info(notification.title, detail=notification.message, link=notification.link)
