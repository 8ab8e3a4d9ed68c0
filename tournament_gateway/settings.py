"""
Django settings for tournament_gateway project.
"""
import os
import sys
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.getenv('DJANGO_SECRET_KEY', 'dev-secret-key-change-in-production')
DEBUG = os.getenv('DEBUG', 'True').lower() == 'true'
ALLOWED_HOSTS = os.getenv('ALLOWED_HOSTS', 'localhost,127.0.0.1').split(',')

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'rest_framework',
    'registrations',
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

ROOT_URLCONF = 'tournament_gateway.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
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

ASGI_APPLICATION = 'tournament_gateway.asgi.application'

# Database configuration
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': os.getenv('DB_NAME', 'tournament_gateway'),
        'USER': os.getenv('DB_USER', 'postgres'),
        'PASSWORD': os.getenv('DB_PASSWORD', 'postgres'),
        'HOST': os.getenv('DB_HOST', 'localhost'),
        'PORT': os.getenv('DB_PORT', '5432'),
    }
}

# Use SQLite for tests to avoid requiring a running PostgreSQL server
if (
    os.getenv('USE_SQLITE_FOR_TESTS', '').lower() == 'true'
    or any('pytest' in arg for arg in sys.argv)
    or os.getenv('PYTEST_CURRENT_TEST')
):
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': os.getenv('SQLITE_NAME', ':memory:'),
        }
    }

AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Celery configuration
CELERY_BROKER_URL = os.getenv('CELERY_BROKER_URL', 'redis://localhost:6379/0')
CELERY_RESULT_BACKEND = os.getenv('CELERY_RESULT_BACKEND', 'redis://localhost:6379/0')
CELERY_ACCEPT_CONTENT = ['json']
CELERY_TASK_SERIALIZER = 'json'
CELERY_RESULT_SERIALIZER = 'json'

# Administrator identity (single static id, compared as a canonical string)
ADMIN_ID = os.getenv('ADMIN_ID', '')

# Spreadsheet mirror (Google Sheets values:append)
SPREADSHEET_ID = os.getenv('SPREADSHEET_ID', '')
SPREADSHEET_API_URL = os.getenv(
    'SPREADSHEET_API_URL',
    'https://sheets.googleapis.com/v4/spreadsheets'
)
SPREADSHEET_RANGE = os.getenv('SPREADSHEET_RANGE', 'A:H')
SPREADSHEET_TOKEN = os.getenv('SPREADSHEET_TOKEN', '')
MIRROR_TIMEOUT = float(os.getenv('MIRROR_TIMEOUT', '10'))
MIRROR_BACKFILL_ENABLED = os.getenv('MIRROR_BACKFILL_ENABLED', 'True').lower() == 'true'

# Notification transport (VK notifications.sendMessage)
VK_API_URL = os.getenv('VK_API_URL', 'https://api.vk.com/method')
VK_API_VERSION = os.getenv('VK_API_VERSION', '5.199')
VK_SERVICE_TOKEN = os.getenv('VK_SERVICE_TOKEN', '')
NOTIFY_TIMEOUT = float(os.getenv('NOTIFY_TIMEOUT', '10'))

# Seconds between two consecutive sends of one broadcast
NOTIFICATION_SEND_DELAY = float(os.getenv('NOTIFICATION_SEND_DELAY', '0.2'))

# Occurrence catalog (display names and delivery links)
OCCURRENCE_CATALOG_PATH = os.getenv(
    'OCCURRENCE_CATALOG_PATH',
    str(BASE_DIR / 'occurrence_catalog.json')
)
OCCURRENCE_PLACEHOLDER_LINK = os.getenv('OCCURRENCE_PLACEHOLDER_LINK', 'https://vk.com')
NOTIFICATION_MESSAGE_TEMPLATE = os.getenv(
    'NOTIFICATION_MESSAGE_TEMPLATE',
    'Reminder: the {occurrence_name} tournament takes place on {target_date}. '
    'Join here: {link}'
)

# Validation configuration
MISSING_REQUIRED_FIELD = os.getenv('MISSING_REQUIRED_FIELD', 'MISSING_REQUIRED_FIELD')
INVALID_TIMESTAMP = os.getenv('INVALID_TIMESTAMP', 'INVALID_TIMESTAMP')
FIELD_TOO_LONG = os.getenv('FIELD_TOO_LONG', 'FIELD_TOO_LONG')

# Logging configuration
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {module} {message}',
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
        'level': 'INFO',
    },
    'loggers': {
        'registrations': {
            'handlers': ['console'],
            'level': 'DEBUG',
            'propagate': False,
        },
    },
}

# REST Framework configuration
REST_FRAMEWORK = {
    'DEFAULT_RENDERER_CLASSES': [
        'rest_framework.renderers.JSONRenderer',
    ],
    'DEFAULT_PARSER_CLASSES': [
        'rest_framework.parsers.JSONParser',
    ],
}
