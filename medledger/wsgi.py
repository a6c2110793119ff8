"""
WSGI config for the ledger project.

Exposes the WSGI callable as ``application``.  WebSocket event
streaming needs the ASGI entry point in ``medledger.asgi`` instead.
"""
import os

from django.core.wsgi import get_wsgi_application  # type: ignore

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'medledger.settings')

application = get_wsgi_application()
