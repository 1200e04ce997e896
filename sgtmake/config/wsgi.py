"""
WSGI config for the SGTMake admin backend.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'sgtmake.config.settings')

application = get_wsgi_application()
