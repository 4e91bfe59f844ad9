"""Contracts for the external collaborators the store talks to.

The store only depends on these protocols; ``gateway/rest.py`` and
``realtime/feed.py`` provide the production implementations.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

type Row = dict[str, Any]


class Table(str, Enum):
    """Remote resource collections."""

    MEMBERS = "members"
    COMPANIES = "companies"
    PROJECTS = "projects"
    TASKS = "tasks"
    COMMENTS = "comments"
    ATTACHMENTS = "attachments"
    NOTIFICATIONS = "notifications"


@dataclass(frozen=True)
class AuthSession:
    """Authenticated session as issued by the identity provider."""

    user_id: str
    access_token: str


class RemoteDataGateway(Protocol):
    """CRUD over the remote collections.

    Implementations raise ``TaskboardError`` subclasses (see
    core/exceptions.py) on failure and never return partial results.
    """

    def bind_session(self, session: AuthSession | None) -> None: ...

    def current_session(self) -> AuthSession | None: ...

    async def select_all(
        self, table: Table, *, order_by: str | None = None, descending: bool = False
    ) -> list[Row]: ...

    async def select_by_id(self, table: Table, id: str) -> Row: ...

    async def insert(self, table: Table, values: Row) -> Row: ...

    async def update(self, table: Table, id: str, values: Row) -> Row | None: ...

    async def delete(self, table: Table, id: str) -> None: ...


class UserProvisioner(Protocol):
    """Privileged create-user function; the only way to mint identities."""

    async def provision(self, access_token: str, body: Row) -> str:
        """Create the account and return the new user's id."""
        ...


type NotificationHandler = Callable[[Row], Awaitable[None]]


class Subscription(Protocol):
    async def close(self) -> None: ...


class NotificationFeed(Protocol):
    """Realtime stream of notification inserts, scoped to one recipient."""

    async def subscribe(self, user_id: str, handler: NotificationHandler) -> Subscription: ...
