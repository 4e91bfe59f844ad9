"""Authorization engine exports."""

from src.taskboard.authz.policy import (
    ADMIN_FIELDS,
    PROFILE_FIELDS,
    Action,
    Verdict,
    can_assign_company,
    can_establish_session,
    can_grant_role,
    can_manage_project,
    can_view_project,
    decide,
    editable_user_fields,
    effective_company_id,
    require,
)

__all__ = [
    "ADMIN_FIELDS",
    "PROFILE_FIELDS",
    "Action",
    "Verdict",
    "can_assign_company",
    "can_establish_session",
    "can_grant_role",
    "can_manage_project",
    "can_view_project",
    "decide",
    "editable_user_fields",
    "effective_company_id",
    "require",
]
