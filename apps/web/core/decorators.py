"""
Decorators for request handling and authorization.
"""

from collections.abc import Callable
from functools import wraps
from typing import Any

from django.http import HttpRequest, JsonResponse

from .rbac import get_user_role, has_min_role


def role_denied(request: HttpRequest, min_role: str) -> JsonResponse | None:
    """
    Check the signed-in user against `min_role`.

    Returns:
        None if allowed, else a 401 (anonymous) or 403 (role too low) response
    """
    if not request.user.is_authenticated:
        return JsonResponse({"error": "Authentication required"}, status=401)

    role = get_user_role(request.user)
    if role is None or not has_min_role(role, min_role):
        return JsonResponse(
            {"error": f"{min_role} role or higher is required"},
            status=403,
        )
    return None


def role_required(min_role: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorator that requires the user to hold at least `min_role`.

    Anonymous users get 401, authenticated users below the role get 403.

    Usage:
        @role_required(User.Role.ADMIN)
        def orders_today(request):
            ...
    """

    def decorator(view_func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(view_func)
        def wrapper(request: HttpRequest, *args: Any, **kwargs: Any) -> Any:
            denied = role_denied(request, min_role)
            if denied is not None:
                return denied
            return view_func(request, *args, **kwargs)

        return wrapper

    return decorator
