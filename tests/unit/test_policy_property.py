"""Property-based tests for the authorization engine using hypothesis."""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from src.taskboard.authz import Action, Verdict, can_grant_role, decide
from src.taskboard.core.validators import AVAILABLE_PERMISSIONS
from src.taskboard.models import Company, Project, Role, User, UserStatus

pytestmark = pytest.mark.unit

USER_IDS = ["u1", "u2", "u3", "u4", "u5"]
COMPANY_IDS = ["c1", "c2", "c3"]

user_ids = st.sampled_from(USER_IDS)
company_ids = st.sampled_from(COMPANY_IDS)
permissions = st.frozensets(st.sampled_from(sorted(AVAILABLE_PERMISSIONS)))


def _user(id: str, role: Role, company_id: str | None, status: UserStatus, perms) -> User:
    return User(
        id=id,
        name=f"User {id}",
        email=f"{id}@example.com",
        role=role,
        company_id=company_id,
        status=status,
        permissions=perms,
    )


users = st.builds(
    _user,
    user_ids,
    st.sampled_from(Role),
    st.one_of(st.none(), company_ids),
    st.sampled_from(UserStatus),
    permissions,
)
plain_users = st.builds(
    _user,
    user_ids,
    st.just(Role.USER),
    st.one_of(st.none(), company_ids),
    st.sampled_from(UserStatus),
    permissions,
)
projects = st.builds(
    lambda company_id, leader_id, members: Project(
        id="p1", company_id=company_id, name="Project", leader_id=leader_id, members=members
    ),
    company_ids,
    user_ids,
    st.frozensets(user_ids),
)
companies = st.builds(
    lambda id, admin_id: Company(id=id, name=f"Company {id}", admin_id=admin_id),
    company_ids,
    st.one_of(st.none(), user_ids),
)

COMPANY_MANAGEMENT = [Action.CREATE, Action.EDIT, Action.DELETE]
ROLE_MUTATION = [Action.EDIT, Action.CHANGE_ROLE]


@given(actor=plain_users, project=projects)
@settings(max_examples=300)
def test_user_visibility_is_scoped(actor: User, project: Project):
    """A USER only sees projects of its company or projects it belongs to."""
    if decide(actor, project, Action.VIEW).allowed:
        assert actor.company_id == project.company_id or actor.id in project.effective_members


@given(actor=plain_users, company=companies, action=st.sampled_from(COMPANY_MANAGEMENT))
@settings(max_examples=200)
def test_user_never_manages_companies(actor: User, company: Company, action: Action):
    assert decide(actor, company, action) == Verdict.DENY


@given(
    actor=plain_users,
    target=users,
    action=st.sampled_from(ROLE_MUTATION),
    role=st.sampled_from(Role),
)
@settings(max_examples=200)
def test_user_never_mutates_roles(actor: User, target: User, action: Action, role: Role):
    assert decide(actor, target, action) == Verdict.DENY
    assert not can_grant_role(actor, role)


@given(actor=users, action=st.sampled_from([Action.DELETE, Action.SUSPEND]))
@settings(max_examples=200)
def test_nobody_deletes_or_suspends_themselves(actor: User, action: Action):
    assert decide(actor, actor, action) == Verdict.DENY


@given(actor=users, project=projects)
def test_verdicts_are_deterministic(actor: User, project: Project):
    """The engine is pure: same inputs, same verdict."""
    for action in Action:
        assert decide(actor, project, action) == decide(actor, project, action)
