"""
Production settings - Postgres, Redis, WhiteNoise and HTTPS only.
"""
import os
import dj_database_url
from .settings import *

DEBUG = False
SECRET_KEY = os.environ['SECRET_KEY']

# Published sites live on <subdomain>.<SITE_SUBDOMAIN_BASE>, so the wildcard
# host has to be allowed next to the API host.
SITE_SUBDOMAIN_BASE = os.environ.get('SITE_SUBDOMAIN_BASE', 'sites.example.com')
ALLOWED_HOSTS = [
    host for host in os.environ.get('ALLOWED_HOSTS', '').split(',') if host
] + [f'.{SITE_SUBDOMAIN_BASE}']

if os.environ.get('DATABASE_URL'):
    DATABASES = {
        'default': dj_database_url.config(
            conn_max_age=600,
            conn_health_checks=True,
        )
    }

# Editor sessions must survive worker restarts
REDIS_URL = os.environ.get('REDIS_URL', 'redis://localhost:6379/0')
CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.redis.RedisCache',
        'LOCATION': REDIS_URL,
    }
}

MIDDLEWARE.insert(1, 'whitenoise.middleware.WhiteNoiseMiddleware')
STORAGES = {
    'default': {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
    },
    'staticfiles': {
        'BACKEND': 'whitenoise.storage.CompressedManifestStaticFilesStorage',
    },
}

MEDIA_ROOT = Path(os.environ.get('MEDIA_ROOT', '/var/lib/sitebuilder/uploads'))

CORS_ALLOWED_ORIGINS = [
    origin for origin in os.environ.get('CORS_ALLOWED_ORIGINS', FRONTEND_URL).split(',') if origin
]
CORS_ALLOW_ALL_ORIGINS = False

SECURE_SSL_REDIRECT = True
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')
SECURE_HSTS_SECONDS = int(os.environ.get('SECURE_HSTS_SECONDS', '0'))
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
AUTH_COOKIE_SECURE = True

LOGGING['root']['level'] = os.environ.get('LOG_LEVEL', 'INFO')
LOGGING['loggers']['django']['level'] = 'WARNING'
