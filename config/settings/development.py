"""
StockFlow — Development Settings

Local development overrides. Activated by:
  DJANGO_SETTINGS_MODULE=config.settings.development

Without DATABASE_URL a local SQLite file is used so the demo catalogue
(manage.py seed_inventory) can be loaded without a PostgreSQL server.

@file config/settings/development.py
"""

from .base import *  # noqa: F401, F403

DEBUG = True

ALLOWED_HOSTS = ['*']

DATABASES = {
    'default': env.db('DATABASE_URL', default=f'sqlite:///{BASE_DIR / "db.sqlite3"}'),  # noqa: F405
}

INSTALLED_APPS += [  # noqa: F405
    'django_extensions',
]

REST_FRAMEWORK['DEFAULT_THROTTLE_RATES'] = {  # noqa: F405
    'anon': '1000/minute',
    'user': '5000/minute',
}

CORS_ALLOW_ALL_ORIGINS = True

LOGGING['loggers']['stockflow']['level'] = 'DEBUG'  # noqa: F405

# LOG_SQL=true prints every query, handy when checking row locks during validation.
if env.bool('LOG_SQL', default=False):  # noqa: F405
    LOGGING['loggers']['django.db.backends'] = {  # noqa: F405
        'handlers': ['console'],
        'level': 'DEBUG',
        'propagate': False,
    }
