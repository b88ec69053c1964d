"""
WSGI config for Souq Orders.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "apps.web.config.settings")

application = get_wsgi_application()
