"""WSGI entry point for SurfStay.

Used by ``runserver`` and production WSGI servers (gunicorn). Defaults to
development settings unless DJANGO_SETTINGS_MODULE is set.
"""

import os
from django.core.wsgi import get_wsgi_application  # type: ignore

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.dev')

application = get_wsgi_application()
