"""
Test settings - sqlite, in-process cache, throwaway media directory.
"""
import tempfile
from pathlib import Path

from .settings import *

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'sitebuilder-tests',
    }
}

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

MEDIA_ROOT = Path(tempfile.mkdtemp(prefix='sitebuilder-media-'))

REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    'DEFAULT_THROTTLE_CLASSES': (),
}

OAUTH_BASE_URL = 'https://idp.test/backend'
OAUTH_CLIENT_ID = 'test-client'

LOGGING['root']['level'] = 'WARNING'
LOGGING['loggers']['apps']['level'] = 'WARNING'
LOGGING['loggers']['sitebuilder_backend']['level'] = 'WARNING'
