"""
Django settings for the NoNap keep-alive service.

Values come from the environment; a .env file next to manage.py is loaded
first so local overrides don't need to be exported.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

# Load .env from the project root (same directory as manage.py)
load_dotenv(BASE_DIR / '.env')


def env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'nonap-insecure-dev-key')
DEBUG = env_bool('DJANGO_DEBUG', False)

allowed = os.environ.get('DJANGO_ALLOWED_HOSTS', '*')
ALLOWED_HOSTS = [host.strip() for host in allowed.split(',') if host.strip()]

INSTALLED_APPS = [
    'apps.pinger',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
]

ROOT_URLCONF = 'core.urls'
APPEND_SLASH = False

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
            ],
        },
    },
]

WSGI_APPLICATION = 'core.wsgi.application'

# No models: ping history is kept in memory only
DATABASES = {}

USE_TZ = True
TIME_ZONE = 'UTC'

# Pinger
PINGER_TARGETS_FILE = os.environ.get('PINGER_TARGETS_FILE', str(BASE_DIR / 'targets.json'))
PINGER_AUTOSTART = env_bool('PINGER_AUTOSTART', False)
PINGER_LOG_CAPACITY = 100
PINGER_LOG_FILE = os.environ.get('PINGER_LOG_FILE') or None
PINGER_REQUEST_TIMEOUT = float(os.environ.get('PINGER_REQUEST_TIMEOUT', '30'))
PINGER_DELAY_UNIT_SECONDS = int(os.environ.get('PINGER_DELAY_UNIT_SECONDS', '60'))
PINGER_USER_AGENT = os.environ.get('PINGER_USER_AGENT', 'NoNap/1.0')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '%(asctime)s %(levelname)s %(name)s: %(message)s',
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
        'level': 'INFO',
    },
    'loggers': {
        'httpx': {
            'level': 'WARNING',
        },
    },
}

# Mirror pinger activity to a file; delay=True so a bad path only fails on write
if PINGER_LOG_FILE:
    LOGGING['formatters']['activity'] = {
        'format': '%(asctime)s %(message)s',
    }
    LOGGING['handlers']['activity_file'] = {
        'class': 'logging.FileHandler',
        'filename': PINGER_LOG_FILE,
        'encoding': 'utf-8',
        'delay': True,
        'formatter': 'activity',
    }
    LOGGING['loggers']['apps.pinger.activity'] = {
        'handlers': ['activity_file'],
        'level': 'INFO',
    }
