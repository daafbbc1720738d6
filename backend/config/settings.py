"""
Django settings for the Spinella restaurant backend.

Values come from environment variables; a local .env file is loaded in
development.
"""
import os
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / '.env')


def env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def env_list(name, default=None):
    value = os.environ.get(name)
    if value is None:
        return list(default or [])
    return [item.strip() for item in value.split(',') if item.strip()]


SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'django-insecure-dev-key-change-me')
DEBUG = env_bool('DJANGO_DEBUG', True)
ALLOWED_HOSTS = env_list('DJANGO_ALLOWED_HOSTS', ['localhost', '127.0.0.1'])

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    # Third party
    'rest_framework',
    'rest_framework_simplejwt',
    'drf_spectacular',

    # Local apps
    'apps.accounts',
    'apps.restaurant',
    'apps.clients',
    'apps.notifications',
    'apps.payments',
    'apps.content',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'config.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'config.wsgi.application'

# Database: Postgres in production, SQLite for local work and tests
if os.environ.get('POSTGRES_DB'):
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.postgresql',
            'NAME': os.environ['POSTGRES_DB'],
            'USER': os.environ.get('POSTGRES_USER', 'postgres'),
            'PASSWORD': os.environ.get('POSTGRES_PASSWORD', ''),
            'HOST': os.environ.get('POSTGRES_HOST', 'localhost'),
            'PORT': os.environ.get('POSTGRES_PORT', '5432'),
        }
    }
else:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': BASE_DIR / 'db.sqlite3',
        }
    }

AUTH_USER_MODEL = 'accounts.User'

AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]

LANGUAGE_CODE = 'en-us'
TIME_ZONE = os.environ.get('RESTAURANT_TIMEZONE', 'Europe/Zurich')
USE_I18N = True
USE_TZ = True

STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'
MEDIA_URL = '/media/'
MEDIA_ROOT = BASE_DIR / 'media'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# REST Framework
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': (
        'rest_framework_simplejwt.authentication.JWTAuthentication',
    ),
    'DEFAULT_PERMISSION_CLASSES': (
        'rest_framework.permissions.IsAuthenticated',
    ),
    'DEFAULT_SCHEMA_CLASS': 'drf_spectacular.openapi.AutoSchema',
}

SIMPLE_JWT = {
    'ACCESS_TOKEN_LIFETIME': timedelta(hours=12),
    'REFRESH_TOKEN_LIFETIME': timedelta(days=7),
    'AUTH_HEADER_TYPES': ('Bearer',),
}

SPECTACULAR_SETTINGS = {
    'TITLE': 'Spinella Restaurant API',
    'DESCRIPTION': 'Reservations, client contacts, push notifications and takeaway checkout.',
    'VERSION': '1.0.0',
}

# Admin dashboard access: only this email may use admin endpoints (empty = any staff login)
ADMIN_EMAIL = os.environ.get('ADMIN_EMAIL', '').strip()

# Public site
SITE_BASE_URL = os.environ.get('SITE_BASE_URL', 'https://www.spinella.ch').rstrip('/')

# Email (Resend)
RESEND_API_KEY = os.environ.get('RESEND_API_KEY', '')
EMAIL_FROM = os.environ.get('EMAIL_FROM', 'Spinella Geneva <info@spinella.ch>')
EMAIL_BCC = os.environ.get('EMAIL_BCC', 'info@spinella.ch')
RESTAURANT_EMAIL = os.environ.get('RESTAURANT_EMAIL', '').strip()

# Web Push (VAPID)
VAPID_PUBLIC_KEY = os.environ.get('VAPID_PUBLIC_KEY', '')
VAPID_PRIVATE_KEY = os.environ.get('VAPID_PRIVATE_KEY', '')
VAPID_CLAIMS_EMAIL = os.environ.get('VAPID_CLAIMS_EMAIL', 'mailto:info@spinella.ch')

# Payments (Stripe)
STRIPE_SECRET_KEY = os.environ.get('STRIPE_SECRET_KEY', '')

# Reservation policy
BOOKING_POLICY = {
    'BLOCKED_DATES': env_list('BOOKING_BLOCKED_DATES', [
        '2026-04-05', '2026-04-06', '2026-04-07', '2026-04-08',
    ]),
    'BLOCKED_DATE_REASON': os.environ.get('BOOKING_BLOCKED_DATE_REASON', 'Easter holidays'),
    'LUNCH_ONLY_DATES': env_list('BOOKING_LUNCH_ONLY_DATES', ['2026-04-15']),
    'REQUEST_ONLY_DATES': env_list('BOOKING_REQUEST_ONLY_DATES', [
        '2026-04-14', '2026-04-15', '2026-04-16', '2026-04-17', '2026-04-18',
    ]),
    # MM-DD, evening slots only
    'REQUEST_ONLY_EVENINGS': env_list('BOOKING_REQUEST_ONLY_EVENINGS', ['02-14']),
    'REQUEST_PARTY_SIZE': int(os.environ.get('BOOKING_REQUEST_PARTY_SIZE', 8)),
    'MAX_PARTY_SIZE': int(os.environ.get('BOOKING_MAX_PARTY_SIZE', 70)),
    'VALENTINES_DATE': os.environ.get('BOOKING_VALENTINES_DATE', '2026-02-14'),
}

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{asctime} {levelname} {name} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'apps': {
            'handlers': ['console'],
            'level': os.environ.get('APP_LOG_LEVEL', 'INFO'),
            'propagate': False,
        },
    },
}
