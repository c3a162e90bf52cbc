"""
ASGI config for core_backend project.

The POS core is plain HTTP; no websocket routing is mounted.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "core_backend.settings")

application = get_asgi_application()
