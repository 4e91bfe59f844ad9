"""Tests for comments, attachments and notification read state."""

from src.taskboard.gateway import Table
from src.taskboard.store.feedback import FeedbackChannel
from src.taskboard.store.store import SyncStore
from src.taskboard.store.views import attachments_for, comments_for
from tests.factories import AttachmentFactory, CommentFactory, NotificationFactory
from tests.helpers import World, sign_in_as
from tests.utils import InMemoryGateway

ATTACHMENT = {
    "file_name": "brief.pdf",
    "file_url": "https://files.example.com/brief.pdf",
    "file_type": "application/pdf",
    "size": 2048,
}


class TestComments:
    async def test_member_comments_on_task(
        self, store: SyncStore, world: World, gateway: InMemoryGateway
    ) -> None:
        await sign_in_as(store, world.member)

        result = await store.comments.add_comment({"task_id": world.task.id, "content": "On it"})

        assert result.ok
        assert result.value.user_id == world.member.id
        assert gateway.row(Table.COMMENTS, result.value.id)["content"] == "On it"
        assert [c.id for c in comments_for(store.state, task_id=world.task.id)] == [
            result.value.id
        ]

    async def test_comment_needs_exactly_one_parent(
        self, store: SyncStore, world: World, gateway: InMemoryGateway
    ) -> None:
        await sign_in_as(store, world.member)

        result = await store.comments.add_comment(
            {"task_id": world.task.id, "project_id": world.project.id, "content": "Both"}
        )

        assert result.error_kind == "validation"
        assert gateway.writes == []

    async def test_outsider_cannot_comment(
        self, store: SyncStore, world: World, gateway: InMemoryGateway
    ) -> None:
        await sign_in_as(store, world.outsider)

        result = await store.comments.add_comment(
            {"project_id": world.project.id, "content": "Hello?"}
        )

        assert result.error_kind == "permission"
        assert gateway.writes == []

    async def test_author_and_leader_may_delete(
        self, store: SyncStore, world: World, gateway: InMemoryGateway
    ) -> None:
        mine = CommentFactory.build(project_id=world.project.id, user_id=world.member.id)
        theirs = CommentFactory.build(project_id=world.project.id, user_id=world.creator.id)
        gateway.seed(mine, theirs)

        await sign_in_as(store, world.member)
        assert (await store.comments.delete_comment(mine.id)).ok
        assert (await store.comments.delete_comment(theirs.id)).error_kind == "permission"

        await sign_in_as(store, world.leader)
        assert (await store.comments.delete_comment(theirs.id)).ok
        assert gateway.tables[Table.COMMENTS] == {}


class TestAttachments:
    async def test_member_attaches_to_task(self, store: SyncStore, world: World) -> None:
        await sign_in_as(store, world.member)

        result = await store.attachments.add_attachment({**ATTACHMENT, "task_id": world.task.id})

        assert result.ok
        assert result.message == "brief.pdf attached"
        assert attachments_for(store.state, task_id=world.task.id) == [result.value]

    async def test_path_in_file_name_rejected(
        self, store: SyncStore, world: World, gateway: InMemoryGateway
    ) -> None:
        await sign_in_as(store, world.member)

        result = await store.attachments.add_attachment(
            {**ATTACHMENT, "file_name": "../etc/passwd", "task_id": world.task.id}
        )

        assert result.error_kind == "validation"
        assert gateway.writes == []

    async def test_task_editor_may_delete_others_upload(
        self, store: SyncStore, world: World, gateway: InMemoryGateway
    ) -> None:
        upload = AttachmentFactory.build(task_id=world.task.id, user_id=world.member.id)
        gateway.seed(upload)
        await sign_in_as(store, world.creator)

        result = await store.attachments.delete_attachment(upload.id)

        assert result.ok
        assert upload.id not in store.state.attachments

    async def test_peer_cannot_delete_project_attachment(
        self, store: SyncStore, world: World, gateway: InMemoryGateway
    ) -> None:
        upload = AttachmentFactory.build(project_id=world.project.id, user_id=world.leader.id)
        gateway.seed(upload)
        await sign_in_as(store, world.member)

        result = await store.attachments.delete_attachment(upload.id)

        assert result.error_kind == "permission"
        assert gateway.writes == []


class TestNotifications:
    async def test_mark_read_is_idempotent(
        self, store: SyncStore, world: World, gateway: InMemoryGateway
    ) -> None:
        notification = NotificationFactory.build(user_id=world.member.id)
        gateway.seed(notification)
        await sign_in_as(store, world.member)

        first = await store.notifications.mark_read(notification.id)
        second = await store.notifications.mark_read(notification.id)

        assert first.ok and second.ok
        assert store.state.notifications[notification.id].read is True
        assert gateway.writes_to(Table.NOTIFICATIONS) == [
            ("update", Table.NOTIFICATIONS, notification.id)
        ]

    async def test_mark_read_is_silent(
        self,
        store: SyncStore,
        world: World,
        gateway: InMemoryGateway,
        feedback: FeedbackChannel,
    ) -> None:
        notification = NotificationFactory.build(user_id=world.member.id)
        gateway.seed(notification)
        await sign_in_as(store, world.member)
        delivered = len(feedback.recent)

        await store.notifications.mark_read(notification.id)

        assert len(feedback.recent) == delivered

    async def test_unknown_notification(self, store: SyncStore, world: World) -> None:
        await sign_in_as(store, world.member)

        result = await store.notifications.mark_read("missing")

        assert result.error_kind == "not_found"

    async def test_mark_all_read(
        self, store: SyncStore, world: World, gateway: InMemoryGateway
    ) -> None:
        gateway.seed(
            NotificationFactory.build(user_id=world.member.id),
            NotificationFactory.build(user_id=world.member.id),
            NotificationFactory.already_read(user_id=world.member.id),
        )
        await sign_in_as(store, world.member)

        result = await store.notifications.mark_all_read()

        assert result.value == 2
        assert all(n.read for n in store.state.notifications.values())
        assert len(gateway.writes_to(Table.NOTIFICATIONS)) == 2

        again = await store.notifications.mark_all_read()

        assert again.value == 0
        assert again.message is None

    async def test_side_effect_notifications_are_validated(
        self, store: SyncStore, world: World, gateway: InMemoryGateway
    ) -> None:
        await sign_in_as(store, world.leader)

        sent = await store.tasks._notify(
            world.leader, [world.member.id, world.leader.id], "Heads up", "Kickoff moved"
        )
        rejected = await store.tasks._notify(world.leader, [world.member.id], "", "No title")

        assert sent == 1
        assert rejected == 0
        [row] = gateway.tables[Table.NOTIFICATIONS].values()
        assert row["user_id"] == world.member.id
        assert row["type"] == "info"
