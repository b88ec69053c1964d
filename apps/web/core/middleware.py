"""
Request middleware - current restaurant and route role checks.
"""

from collections.abc import Callable

from django.http import HttpRequest, HttpResponse

from .decorators import role_denied
from .models import Client
from .rbac import get_required_role_for_route

CLIENT_HEADER = "X-Client-ID"


def _client_from_header(request: HttpRequest) -> Client | None:
    slug = request.headers.get(CLIENT_HEADER)
    if not slug:
        return None
    return Client.objects.filter(slug=slug, is_active=True).first()


class ClientMiddleware:
    """
    Sets request.client to the restaurant the request acts for, or None.

    - Signed-in staff: always their own restaurant; the header is ignored
      so staff cannot read another restaurant's data.
    - Superusers: the restaurant named by the X-Client-ID header, else none
      (which for_client() treats as all restaurants).
    - Anonymous API calls: the X-Client-ID header, if it names an active
      restaurant.

    Django admin paths are left alone.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        if not request.path.startswith("/admin/"):
            request.client = self._resolve(request)  # type: ignore[attr-defined]
        return self.get_response(request)

    def _resolve(self, request: HttpRequest) -> Client | None:
        user = request.user
        if user.is_authenticated and not user.is_superuser:
            return getattr(user, "client", None)
        return _client_from_header(request)


class RouteRoleMiddleware:
    """
    Enforces ROUTE_PERMISSIONS: paths under a listed prefix need at least
    the listed role. Unlisted paths pass through.

    Must run after AuthenticationMiddleware.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        required = get_required_role_for_route(request.path)
        if required is not None:
            denied = role_denied(request, required)
            if denied is not None:
                return denied
        return self.get_response(request)
