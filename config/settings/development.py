from .base import *  # noqa: F401, F403

DEBUG = True

ALLOWED_HOSTS = ['*']

# Report violations instead of blocking while iterating on content.
CSP['REPORT_ONLY'] = env_flag('CSP_REPORT_ONLY', 'true')  # noqa: F405
CSP['ENABLED'] = env_flag('CSP_ENABLED', 'true')  # noqa: F405
