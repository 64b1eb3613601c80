"""
ASGI config for restaurant_backend project.

The service layer exposes awaitable wrappers (see ``OrderService.acreate_order``
and friends), so the project can be served by an ASGI server as well.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "restaurant_backend.settings")

application = get_asgi_application()
