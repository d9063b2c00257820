from .base import *  # noqa: F401, F403

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

# Tests opt into policy settings explicitly with override_settings.
CSP = {}  # noqa: F811
