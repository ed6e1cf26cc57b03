"""
Django settings for sitebuilder_backend project.
"""
import os
from pathlib import Path
from datetime import timedelta
from dotenv import load_dotenv

# Build paths
BASE_DIR = Path(__file__).resolve().parent.parent
_project_root = BASE_DIR.parent

# Load .env first, then let .env.local override it for local development
_env_main = _project_root / '.env'
_env_local = _project_root / '.env.local'

if _env_main.exists():
    load_dotenv(_env_main, override=False)

if _env_local.exists():
    load_dotenv(_env_local, override=True)


def _env_bool(name, default='0'):
    return os.getenv(name, default) in ('1', 'true', 'True', 'TRUE', 'yes')


# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.getenv('SECRET_KEY', 'django-insecure-dev-key-change-this')

# SECURITY: DEBUG defaults to True for development
# In production, explicitly set DEBUG=0
DEBUG = os.getenv('DEBUG', '1') in ('1', 'true', 'True', 'TRUE', '')

ALLOWED_HOSTS = os.getenv('ALLOWED_HOSTS', '*,localhost,127.0.0.1').split(',')

# Frontend URL (for CORS)
FRONTEND_URL = os.getenv('FRONTEND_URL', 'http://localhost:3000')

# Application definition
INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    # Third party apps
    'rest_framework',
    'rest_framework_simplejwt',
    'rest_framework_simplejwt.token_blacklist',
    'corsheaders',

    # Local apps
    'apps.users',
    'apps.themes',  # Theme catalogue
    'apps.sites',  # Sites and pages
    'apps.templates',  # Starter site templates
    'apps.assets',  # Uploaded media
    'apps.oauth',  # Identity provider proxy
    'apps.editor',  # Section/component editor sessions
    'apps.renderer',  # Public site renderer
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'corsheaders.middleware.CorsMiddleware',
    'sitebuilder_backend.middleware.RequestLoggingMiddleware',
    'apps.renderer.middleware.SubdomainSiteMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'sitebuilder_backend.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [BASE_DIR / 'templates'],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'sitebuilder_backend.wsgi.application'

# Database configuration
import dj_database_url

USE_SQLITE = os.getenv('USE_SQLITE', '0') == '1'
DATABASE_URL = os.getenv('DATABASE_URL')

if USE_SQLITE:
    # SQLite for local development
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': BASE_DIR / 'db.sqlite3',
        }
    }
elif DATABASE_URL:
    DATABASES = {
        'default': dj_database_url.parse(DATABASE_URL)
    }
else:
    # Fall back to individual environment variables
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.postgresql',
            'NAME': os.getenv('DB_NAME', 'sitebuilder_db'),
            'USER': os.getenv('DB_USER', 'sitebuilder_user'),
            'PASSWORD': os.getenv('DB_PASSWORD', 'sitebuilder_password'),
            'HOST': os.getenv('DB_HOST', 'localhost'),
            'PORT': os.getenv('DB_PORT', '5432'),
        }
    }

# Password validation
AUTH_PASSWORD_VALIDATORS = [
    {
        'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator',
    },
    {
        'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator',
    },
    {
        'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator',
    },
    {
        'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator',
    },
    {
        'NAME': 'apps.users.validators.PasswordComplexityValidator',
    },
]

# Internationalization
LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

# Static files (CSS, JavaScript, Images)
STATIC_URL = 'static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

# Uploaded assets are served from /uploads
MEDIA_URL = '/uploads/'
MEDIA_ROOT = Path(os.getenv('MEDIA_ROOT', BASE_DIR / 'uploads'))

# Default primary key field type
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Custom User Model
AUTH_USER_MODEL = 'users.User'

# REST Framework
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': (
        'apps.users.authentication.CookieJWTAuthentication',
    ),
    'DEFAULT_PERMISSION_CLASSES': (
        'rest_framework.permissions.IsAuthenticated',
    ),
    'DEFAULT_PAGINATION_CLASS': 'sitebuilder_backend.pagination.StandardResultsSetPagination',
    'PAGE_SIZE': 20,
    'EXCEPTION_HANDLER': 'sitebuilder_backend.exceptions.api_exception_handler',
    'DEFAULT_THROTTLE_CLASSES': (
        'rest_framework.throttling.AnonRateThrottle',
        'rest_framework.throttling.UserRateThrottle',
    ),
    'DEFAULT_THROTTLE_RATES': {
        'anon': os.getenv('THROTTLE_ANON', '400/hour'),
        'user': os.getenv('THROTTLE_USER', '2000/hour'),
    },
}

# JWT Settings
SIMPLE_JWT = {
    'ACCESS_TOKEN_LIFETIME': timedelta(days=int(os.getenv('JWT_ACCESS_TOKEN_DAYS', '7'))),
    'REFRESH_TOKEN_LIFETIME': timedelta(days=int(os.getenv('JWT_REFRESH_TOKEN_DAYS', '30'))),
    'ROTATE_REFRESH_TOKENS': True,
    'BLACKLIST_AFTER_ROTATION': True,
    'UPDATE_LAST_LOGIN': True,
    'AUTH_HEADER_TYPES': ('Bearer',),
}

# Auth cookies (set on login, read by CookieJWTAuthentication)
AUTH_COOKIE_ACCESS = 'token'
AUTH_COOKIE_REFRESH = 'refresh_token'
AUTH_COOKIE_NAMES = ('token', 'access_token')
AUTH_COOKIE_SECURE = _env_bool('AUTH_COOKIE_SECURE', '0' if DEBUG else '1')
AUTH_COOKIE_SAMESITE = 'Strict'

# CORS Settings
CORS_ALLOWED_ORIGINS = [
    origin for origin in os.getenv('CORS_ALLOWED_ORIGINS', FRONTEND_URL).split(',') if origin
]
CORS_ALLOW_CREDENTIALS = True
CORS_ALLOW_METHODS = [
    "DELETE",
    "GET",
    "OPTIONS",
    "PATCH",
    "POST",
    "PUT",
]
CORS_ALLOW_HEADERS = [
    "accept",
    "accept-encoding",
    "authorization",
    "content-type",
    "dnt",
    "origin",
    "user-agent",
    "x-csrftoken",
    "x-requested-with",
]

# Published sites are also reachable at <subdomain>.<SITE_SUBDOMAIN_BASE>
SITE_SUBDOMAIN_BASE = os.getenv('SITE_SUBDOMAIN_BASE', 'localhost')

# Cache - Redis when available, in-process otherwise
REDIS_URL = os.getenv('REDIS_URL', '')
if REDIS_URL:
    CACHES = {
        'default': {
            'BACKEND': 'django.core.cache.backends.redis.RedisCache',
            'LOCATION': REDIS_URL,
        }
    }
else:
    CACHES = {
        'default': {
            'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
            'LOCATION': 'sitebuilder',
        }
    }

# Identity provider (IVP/ISEA) proxy
OAUTH_BASE_URL = os.getenv('OAUTH_BASE_URL', 'https://ivp.isea.in/backend')
OAUTH_CLIENT_ID = os.getenv('OAUTH_CLIENT_ID', 'owl')
OAUTH_PROVIDER_NAME = 'ivp'
OAUTH_TIMEOUT = int(os.getenv('OAUTH_TIMEOUT', '15'))

# Uploads and storage quota
MAX_FILE_SIZE = int(os.getenv('MAX_FILE_SIZE', str(5 * 1024 * 1024)))
DEFAULT_STORAGE_LIMIT = int(os.getenv('DEFAULT_STORAGE_LIMIT', str(1024 * 1024 * 1024)))
DATA_UPLOAD_MAX_MEMORY_SIZE = MAX_FILE_SIZE + 1024 * 1024

# Site limits
MAX_SITES_PER_USER = int(os.getenv('MAX_SITES_PER_USER', '10'))

# Editor sessions
EDITOR_HISTORY_LIMIT = int(os.getenv('EDITOR_HISTORY_LIMIT', '100'))
EDITOR_SESSION_TIMEOUT = int(os.getenv('EDITOR_SESSION_TIMEOUT', str(60 * 60 * 24)))

# Logging
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '[{asctime}] {levelname} {name}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': LOG_LEVEL,
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'apps': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
        'sitebuilder_backend': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
    },
}
