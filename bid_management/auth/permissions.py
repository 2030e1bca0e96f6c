"""Role rules for tender actions.

``allowed_actions`` is what the frontend uses to decide which buttons to
render; the services call ``require`` with the same rules before mutating.
"""

from typing import Dict, Iterable

from ..errors import PermissionDeniedError
from ..models import ApprovalStatus, Tender, User, UserRole

ASSIGN_ROLES = (UserRole.ADMIN, UserRole.MANAGER)
DELETE_ROLES = (UserRole.ADMIN,)
EDIT_ROLES = (UserRole.ADMIN, UserRole.MANAGER)
NOT_RELEVANT_APPROVER_ROLES = (UserRole.ADMIN,)
FINANCE_APPROVER_ROLES = (UserRole.ADMIN, UserRole.FINANCE_MANAGER)
USER_ADMIN_ROLES = (UserRole.ADMIN,)
IMPORT_ROLES = (UserRole.ADMIN, UserRole.MANAGER)


def has_role(user: User, roles: Iterable[UserRole]) -> bool:
    return user.is_active and user.role in tuple(roles)


def require(user: User, roles: Iterable[UserRole], action: str) -> None:
    """Raise PermissionDeniedError unless ``user`` holds one of ``roles``."""
    if not has_role(user, roles):
        raise PermissionDeniedError(
            f"Insufficient permissions to {action}",
            details={"required": [r.value for r in roles], "current": user.role.value},
        )


def can_edit(user: User, tender: Tender) -> bool:
    return has_role(user, EDIT_ROLES) or (user.is_active and tender.assigned_to == user.id)


def allowed_actions(user: User, tender: Tender) -> Dict[str, bool]:
    """Actions ``user`` may take on ``tender``, keyed as the UI names them."""
    not_relevant = tender.not_relevant_status
    return {
        "assign": has_role(user, ASSIGN_ROLES),
        "delete": has_role(user, DELETE_ROLES),
        "edit": can_edit(user, tender),
        "markNotRelevant": user.is_active and not_relevant not in (
            ApprovalStatus.PENDING,
            ApprovalStatus.APPROVED,
        ),
        "approveNotRelevant": has_role(user, NOT_RELEVANT_APPROVER_ROLES)
        and not_relevant == ApprovalStatus.PENDING,
    }
