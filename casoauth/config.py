"""Flask configuration."""

import os

VERSION = '0.1'

SECRET_KEY = os.environ.get('SECRET_KEY', 'asdf1234')
"""Signs the Flask session cookie, which carries the OAuth session key."""

SERVER_NAME = os.environ.get('CASOAUTH_SERVER_NAME')

LOGLEVEL = os.environ.get('LOGLEVEL', 20)
LOG_JSON = bool(int(os.environ.get('LOG_JSON', '1')))
"""If 1, log records are written to stderr as JSON objects."""

#################### CAS ####################
CAS_LOGIN_URL = os.environ.get('CAS_LOGIN_URL',
                               'https://localhost:8443/cas/login')
"""Users are sent here to log in, with a ``service`` parameter to return."""

OAUTH_PATH_PREFIX = os.environ.get('OAUTH_PATH_PREFIX', '/oauth2.0')

ACCESS_TOKEN_URL = os.environ.get(
    'ACCESS_TOKEN_URL',
    'https://localhost:8443/cas/oauth2.0/accessToken'
)
"""Upstream endpoint that redeems authorization codes for access tokens."""

PROFILE_URL = os.environ.get(
    'PROFILE_URL',
    'https://localhost:8443/cas/oauth2.0/profile'
)
"""Upstream endpoint that serves the profile for an access token."""

ERROR_STATUS_CODE = int(os.environ.get('ERROR_STATUS_CODE', '200'))
"""Status code for rejected OAuth requests.

Legacy clients expect 200 with an error payload. Setting this to 400 is
stricter, but breaks those clients."""

#################### Transaction store ####################
REDIS_HOST = os.environ.get('REDIS_HOST', 'localhost')
REDIS_PORT = os.environ.get('REDIS_PORT', '6379')
REDIS_DATABASE = os.environ.get('REDIS_DATABASE', '0')
REDIS_TOKEN = os.environ.get('REDIS_TOKEN', None)
"""This is the token used in the AUTH procedure."""

REDIS_FAKE = bool(int(os.environ.get('REDIS_FAKE', '0')))
"""Use the FakeRedis library instead of a redis service.

Useful for testing, dev, beta."""

TRANSACTION_KEY_PREFIX = os.environ.get('TRANSACTION_KEY_PREFIX',
                                        'oauth20:transaction:')

SESSION_DURATION = os.environ.get('SESSION_DURATION', '7200')
"""Seconds that an authorization transaction may wait for its callback."""

SESSION_COOKIE_NAME = os.environ.get('SESSION_COOKIE_NAME',
                                     'CASOAUTH_SESSION')
SESSION_COOKIE_SECURE = \
    bool(int(os.environ.get('SESSION_COOKIE_SECURE', '1')))
SESSION_COOKIE_HTTPONLY = True

#################### Client registry ####################
SQLALCHEMY_DATABASE_URI = os.environ.get('SQLALCHEMY_DATABASE_URI',
                                         'sqlite://')
SQLALCHEMY_TRACK_MODIFICATIONS = False
CREATE_DB = bool(int(os.environ.get('CREATE_DB', 0)))
