"""Test helper functions for common data creation patterns."""

from dataclasses import dataclass

from src.taskboard.gateway import AuthSession
from src.taskboard.models import Company, Project, Subtask, Task, User, new_id
from src.taskboard.store.store import SyncStore
from tests.factories import CompanyFactory, ProjectFactory, TaskFactory, UserFactory
from tests.utils import InMemoryGateway


@dataclass
class World:
    """Two tenants and one project with a task.

    acme: admin, leader, member, creator (all USER except admin)
    globex: admin, outsider
    project (acme): leader=leader, members={member, creator}
    task: created by creator, assigned to member, one subtask for member
    """

    master: User
    acme: Company
    globex: Company
    acme_admin: User
    leader: User
    member: User
    creator: User
    globex_admin: User
    outsider: User
    project: Project
    task: Task


def build_world(gateway: InMemoryGateway) -> World:
    """Create the standard fixture tenants and seed them into ``gateway``."""
    acme = CompanyFactory.build(name="Acme")
    globex = CompanyFactory.build(name="Globex")
    master = UserFactory.master()
    acme_admin = UserFactory.admin(acme.id, name="Ada Admin")
    leader = UserFactory.member(acme.id, name="Leo Leader")
    member = UserFactory.member(acme.id, name="Mia Member")
    creator = UserFactory.member(acme.id, name="Cal Creator")
    globex_admin = UserFactory.admin(globex.id, name="Gus Admin")
    outsider = UserFactory.member(globex.id, name="Olga Outsider")

    project = ProjectFactory.build(
        company_id=acme.id,
        name="Launch",
        leader_id=leader.id,
        members=frozenset({member.id, creator.id}),
    )
    task = TaskFactory.build(
        project_id=project.id,
        creator_id=creator.id,
        title="Write docs",
        assignee_ids=frozenset({member.id}),
        subtasks=(
            Subtask(id=new_id(), title="Outline", member_ids=frozenset({member.id})),
        ),
    )

    gateway.seed(
        acme,
        globex,
        master,
        acme_admin,
        leader,
        member,
        creator,
        globex_admin,
        outsider,
        project,
        task,
    )
    return World(
        master=master,
        acme=acme,
        globex=globex,
        acme_admin=acme_admin,
        leader=leader,
        member=member,
        creator=creator,
        globex_admin=globex_admin,
        outsider=outsider,
        project=project,
        task=task,
    )


def session_for(user: User) -> AuthSession:
    return AuthSession(user_id=user.id, access_token=f"token-{user.id}")


async def sign_in_as(store: SyncStore, user: User) -> SyncStore:
    """Sign ``user`` in and wait for the load to finish."""
    await store.sign_in(session_for(user))
    return store
