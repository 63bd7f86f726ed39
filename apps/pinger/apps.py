import os

from django.apps import AppConfig

MANAGE_ENTRY_POINTS = ('manage.py', 'django-admin', 'django-admin.py', '__main__.py')
TEST_RUNNERS = ('pytest', 'py.test')


def serves_requests(argv, environ):
    """Whether this process should run the background ping loops."""
    # Don't start background threads during tests
    if 'test' in argv or (argv and os.path.basename(argv[0]) in TEST_RUNNERS):
        return False

    # WSGI servers (gunicorn, uwsgi, ...) import the project directly
    if not argv or os.path.basename(argv[0]) not in MANAGE_ENTRY_POINTS:
        return True

    # Other management commands run once and exit
    if len(argv) < 2 or argv[1] != 'runserver':
        return False

    # runserver's autoreloader parent only watches files; the child serves
    return environ.get('RUN_MAIN') == 'true' or '--noreload' in argv


class PingerConfig(AppConfig):
    name = 'apps.pinger'

    def ready(self):
        import sys

        if not serves_requests(sys.argv, os.environ):
            return

        from . import keepalive
        keepalive.start()
