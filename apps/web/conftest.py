"""
Shared pytest fixtures.
"""

import pytest

from apps.web.core.models import Client, User
from apps.web.restaurant.tests.factories import ClientFactory, UserFactory


@pytest.fixture
def client_tenant(db) -> Client:
    """The restaurant most tests act for."""
    return ClientFactory(slug="test-restaurant", name="Test Restaurant")


@pytest.fixture
def user(client_tenant: Client) -> User:
    """A staff member of client_tenant (lowest role)."""
    return UserFactory(username="testuser", client=client_tenant, role=User.Role.STAFF)
