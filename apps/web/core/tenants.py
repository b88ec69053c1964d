"""
Tenant resolution - restaurant slug to Client.
"""

import logging

from .models import Client

logger = logging.getLogger(__name__)


def resolve_tenant(slug: str | None) -> Client | None:
    """
    Look up the tenant for a restaurant slug.

    Returns None for a blank or unknown slug; callers decide whether a
    missing tenant matters (order reconciliation proceeds without one).
    """
    if not slug:
        return None

    tenant = Client.objects.filter(slug=slug).first()
    if tenant is None:
        logger.info("No tenant registered for restaurant slug: %s", slug)
    return tenant
