"""
Role-based access control.

Role hierarchy: OWNER > ADMIN > STAFF. Higher level = more privileges.
Routes not listed in ROUTE_PERMISSIONS are public.
"""

from typing import Any

from .models import User

Role = User.Role

ROLE_LEVEL: dict[str, int] = {
    Role.STAFF: 1,
    Role.ADMIN: 2,
    Role.OWNER: 3,
}

# (path prefix, minimum role)
ROUTE_PERMISSIONS: list[tuple[str, str]] = [
    ("/dashboard/", Role.ADMIN),
]


def has_min_role(user_role: str, required_role: str) -> bool:
    """
    Check if a role meets or exceeds the minimum required role.

    Unknown roles rank below every known role.

    Example:
        has_min_role("OWNER", "ADMIN")  # True
        has_min_role("STAFF", "ADMIN")  # False
    """
    return ROLE_LEVEL.get(user_role, 0) >= ROLE_LEVEL.get(required_role, 0)


def get_required_role_for_route(pathname: str) -> str | None:
    """Minimum role for a path, or None if the route is public."""
    for prefix, min_role in ROUTE_PERMISSIONS:
        if pathname.startswith(prefix):
            return min_role
    return None


def get_user_role(user: Any) -> str | None:
    """
    Role lookup for an authenticated user.

    Superusers act as owners; inactive or anonymous users have no role.
    """
    if not getattr(user, "is_authenticated", False) or not user.is_active:
        return None
    if user.is_superuser:
        return Role.OWNER
    role: str = user.role
    return role
