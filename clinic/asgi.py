"""
ASGI config for the clinic project.

The back-office has no websocket traffic, so plain HTTP is served by
Django's own ASGI handler (e.g. ``uvicorn clinic.asgi:application``).
"""
import os

from django.core.asgi import get_asgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'clinic.settings')

application = get_asgi_application()
