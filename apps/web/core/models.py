"""
Core models - restaurants (tenants) and the people who run them.

Orders and payments carry an optional tenant; see TenantScopedModel.
"""

from django.contrib.auth.models import AbstractUser
from django.core.exceptions import ValidationError
from django.db import models

from .managers import TenantScopedManager


class Client(models.Model):
    """
    A restaurant on the platform.

    The slug is what storefronts put in checkout metadata, so it must
    never change once orders reference it.
    """

    slug = models.SlugField(unique=True, help_text="Storefront slug, e.g. al-bayt")
    name = models.CharField(max_length=200)
    email = models.EmailField()
    phone = models.CharField(max_length=20, blank=True)
    address = models.TextField(blank=True)

    is_active = models.BooleanField(
        default=True,
        help_text="Inactive restaurants keep their history but cannot be selected",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "tenants"
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class User(AbstractUser):
    """
    Platform user.

    Restaurant staff belong to exactly one Client and hold a role there.
    Platform superusers have no Client and act as owners everywhere.
    """

    class Role(models.TextChoices):
        OWNER = "OWNER", "Owner"
        ADMIN = "ADMIN", "Admin"
        STAFF = "STAFF", "Staff"

    client = models.ForeignKey(
        Client,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="users",
        help_text="Null for superusers",
    )
    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.STAFF,
    )

    class Meta:
        ordering = ["username"]

    def __str__(self) -> str:
        return f"{self.username} @ {self.client.slug}" if self.client else self.username

    def clean(self) -> None:
        super().clean()
        if not self.is_superuser and self.client_id is None:
            raise ValidationError({"client": "Restaurant staff must belong to a restaurant."})


class TenantScopedModel(models.Model):
    """
    Abstract base for rows that may belong to a restaurant.

    The tenant is looked up from the restaurant slug when the row is
    written. An unknown slug leaves it empty rather than losing the row,
    and deleting a restaurant keeps its orders and payments.
    """

    tenant = models.ForeignKey(
        Client,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="%(class)ss",  # client.orders, client.payments
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantScopedManager()

    class Meta:
        abstract = True
