"""Web Server Gateway Interface entry-point."""

from casoauth.factory import create_web_app
import os

__flask_app__ = create_web_app()


def application(environ, start_response):    # type: ignore
    """WSGI application."""
    for key, value in environ.items():
        # uWSGI may pass in the hostname as part of the request environ,
        # which is usually just a container ID. ``SERVER_NAME`` stays
        # explicitly configured, either in config.py or via os.environ.
        if key == 'SERVER_NAME':
            continue
        if key in __flask_app__.config:
            os.environ[key] = str(value)
            __flask_app__.config[key] = str(value)
    return __flask_app__(environ, start_response)
