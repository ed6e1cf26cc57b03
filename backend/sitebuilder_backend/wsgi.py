"""
WSGI config for sitebuilder_backend project.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'sitebuilder_backend.settings')

application = get_wsgi_application()
