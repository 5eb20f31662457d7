"""Test settings for SurfStay.

SQLite, eager Celery, in-memory e-mail and no external payment gateway
credentials. Used by pytest-django (see pyproject.toml).
"""

from .base import *  # noqa: F401,F403

DEBUG = False

SECRET_KEY = 'surfstay-test-only-secret-key-with-enough-bytes-for-hs256'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

STORAGES = {
    'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
    'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
}

SITE_URL = 'https://surfstay.test'

XENDIT_SECRET_KEY = ''
XENDIT_CALLBACK_TOKEN = ''
XENDIT_API_BASE_URL = 'https://api.xendit.test'

# Plain stdlib handlers so pytest's caplog sees application records
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'handlers': {
        'console': {'class': 'logging.StreamHandler', 'level': 'WARNING'},
    },
    'root': {'handlers': ['console'], 'level': 'WARNING'},
    'loggers': {
        'apps': {'level': 'INFO'},
        'shared': {'level': 'INFO'},
    },
}
