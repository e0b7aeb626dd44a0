"""
Role-Action Matrix — static mapping of project role → allowed actions.

Pure lookups, no database access. ``manager`` holds every action so the
on-site project lead has full project authority without the global admin
role.

Usage:
    from app.services.permission import Action, can_perform, get_allowed_actions

    if can_perform("engineer", Action.SUBMITTAL_REVIEW):
        ...
"""

from enum import Enum

from app.models.auth import ProjectRole


class Action(str, Enum):
    """Closed set of atomic capability tokens."""
    SUBMITTAL_CREATE = "submittal:create"
    SUBMITTAL_REVIEW = "submittal:review"
    RFI_CREATE = "rfi:create"
    RFI_RESPOND = "rfi:respond"
    RFI_CLOSE = "rfi:close"
    DAILY_LOG_CREATE = "daily_log:create"
    PUNCH_LIST_CREATE = "punch_list:create"
    PUNCH_LIST_RESOLVE = "punch_list:resolve"
    PUNCH_LIST_VERIFY = "punch_list:verify"
    TEAM_MANAGE = "team:manage"
    PROJECT_MANAGE = "project:manage"
    BUDGET_VIEW = "budget:view"
    SCHEDULE_EDIT = "schedule:edit"


ALL_ACTIONS = frozenset(Action)

PERMISSION_MATRIX: dict[ProjectRole, frozenset[Action]] = {
    ProjectRole.MANAGER: ALL_ACTIONS,
    ProjectRole.SUPERINTENDENT: frozenset({
        Action.SUBMITTAL_CREATE, Action.SUBMITTAL_REVIEW,
        Action.RFI_CREATE, Action.RFI_RESPOND, Action.RFI_CLOSE,
        Action.DAILY_LOG_CREATE,
        Action.PUNCH_LIST_CREATE, Action.PUNCH_LIST_RESOLVE, Action.PUNCH_LIST_VERIFY,
        Action.BUDGET_VIEW,
        Action.SCHEDULE_EDIT,
    }),
    ProjectRole.FOREMAN: frozenset({
        Action.DAILY_LOG_CREATE,
        Action.PUNCH_LIST_CREATE, Action.PUNCH_LIST_RESOLVE,
        Action.RFI_CREATE,
    }),
    ProjectRole.ENGINEER: frozenset({
        Action.SUBMITTAL_CREATE, Action.SUBMITTAL_REVIEW,
        Action.RFI_CREATE, Action.RFI_RESPOND,
        Action.PUNCH_LIST_VERIFY,
        Action.BUDGET_VIEW,
    }),
    ProjectRole.CONTRACTOR: frozenset({
        Action.SUBMITTAL_CREATE,
        Action.RFI_CREATE,
        Action.DAILY_LOG_CREATE,
        Action.PUNCH_LIST_CREATE,
    }),
    ProjectRole.INSPECTOR: frozenset({
        Action.PUNCH_LIST_CREATE, Action.PUNCH_LIST_VERIFY,
        Action.RFI_CREATE,
    }),
    ProjectRole.OWNER: frozenset({
        Action.BUDGET_VIEW,
        Action.RFI_CREATE,
    }),
}


def _check_matrix(matrix: dict) -> None:
    """Every role has an entry and every action is granted somewhere."""
    missing_roles = set(ProjectRole) - set(matrix)
    if missing_roles:
        raise RuntimeError(f"PERMISSION_MATRIX missing roles: {sorted(r.value for r in missing_roles)}")
    granted = frozenset().union(*matrix.values())
    unreachable = ALL_ACTIONS - granted
    if unreachable:
        raise RuntimeError(f"PERMISSION_MATRIX has unreachable actions: {sorted(a.value for a in unreachable)}")


_check_matrix(PERMISSION_MATRIX)


def to_action(action) -> Action:
    """Coerce a token to ``Action``. Unknown tokens are a programmer error."""
    try:
        return Action(action)
    except ValueError:
        raise ValueError(f"Unknown action: {action!r}") from None


def _to_role(project_role) -> ProjectRole | None:
    if project_role is None:
        return None
    try:
        return ProjectRole(project_role)
    except ValueError:
        return None


def get_allowed_actions(project_role) -> frozenset[Action]:
    """Actions granted to *project_role*; unknown or missing role → empty set."""
    role = _to_role(project_role)
    if role is None:
        return frozenset()
    return PERMISSION_MATRIX[role]


def can_perform(project_role, action) -> bool:
    """True if *project_role* is granted *action*.

    Raises:
        ValueError: *action* is not one of the ``Action`` tokens.
    """
    return to_action(action) in get_allowed_actions(project_role)
