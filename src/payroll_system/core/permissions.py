from __future__ import annotations

from .enums import Permission, Role
from .exceptions import AuthorizationError

ROLE_PERMISSIONS: dict[Role, frozenset[Permission]] = {
    Role.EMPLOYEE: frozenset({
        Permission.RECORD_ATTENDANCE,
        Permission.SUBMIT_REQUESTS,
    }),
    Role.SUPERVISOR: frozenset({
        Permission.RECORD_ATTENDANCE,
        Permission.SUBMIT_REQUESTS,
        Permission.APPROVE_TEAM_REQUESTS,
        Permission.VIEW_ALL_ATTENDANCE,
    }),
    Role.HR: frozenset({
        Permission.RECORD_ATTENDANCE,
        Permission.SUBMIT_REQUESTS,
        Permission.APPROVE_ALL_REQUESTS,
        Permission.VIEW_ALL_ATTENDANCE,
        Permission.MANAGE_LEAVE_BALANCES,
        Permission.PROCESS_PAYROLL,
        Permission.MANAGE_EMPLOYEES,
    }),
    Role.IT: frozenset({
        Permission.RECORD_ATTENDANCE,
        Permission.MANAGE_EMPLOYEES,
    }),
}


def has_permission(role: Role, permission: Permission) -> bool:
    return permission in ROLE_PERMISSIONS.get(Role(role), frozenset())


def require_permission(role: Role, permission: Permission) -> None:
    if not has_permission(role, permission):
        raise AuthorizationError(f"Role '{Role(role).value}' lacks permission {permission.value}")
