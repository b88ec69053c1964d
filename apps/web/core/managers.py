"""
Tenant scoping for querysets.

Views reach tenant data through Model.objects.for_client(request), which
reads the tenant ClientMiddleware attached to the request.
"""

from typing import TYPE_CHECKING, Any, TypeVar

from django.db import models

if TYPE_CHECKING:
    from django.http import HttpRequest

    from .models import Client, TenantScopedModel

_T = TypeVar("_T", bound="TenantScopedModel")


class TenantQuerySet(models.QuerySet[_T]):
    def for_tenant(self, tenant: "Client") -> "TenantQuerySet[_T]":
        return self.filter(tenant=tenant)


class TenantScopedManager(models.Manager[_T]):
    """
    Manager for TenantScopedModel subclasses.

    SECURITY: views must go through for_client(); a bare .all() leaks
    other restaurants' rows.
    """

    def get_queryset(self) -> TenantQuerySet[_T]:
        return TenantQuerySet(self.model, using=self._db)

    def for_tenant(self, tenant: "Client") -> TenantQuerySet[_T]:
        return self.get_queryset().for_tenant(tenant)

    def for_client(self, request: "HttpRequest") -> TenantQuerySet[_T]:
        """
        Rows visible to the request.

        A request with a tenant sees that tenant's rows. A superuser with
        no tenant selected sees every row, unassigned ones included.

        Raises:
            ValueError: If the request has no tenant and is not a superuser
        """
        tenant: Any = getattr(request, "client", None)
        if tenant is not None:
            return self.for_tenant(tenant)
        if getattr(request.user, "is_superuser", False):
            return self.get_queryset()
        msg = "Request has no client attached. Is ClientMiddleware enabled?"
        raise ValueError(msg)
