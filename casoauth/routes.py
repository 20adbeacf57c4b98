"""
Front dispatcher for the OAuth endpoints.

All OAuth endpoints live under one prefix (``/oauth2.0`` by default); the last
path segment names the endpoint. The table from :class:`.Route` to view is
built once, when :func:`init_app` attaches the blueprint to the application.
"""

import logging
import uuid
from http import HTTPStatus
from typing import Callable, Dict

from flask import Blueprint, Flask, Response, current_app, make_response, \
    redirect, render_template, request, session

from .controllers import authorize as authorize_controller
from .controllers import callback as callback_controller
from .domain import Route
from .exceptions import OAuthRequestError, DispatchUnknownMethod

logger = logging.getLogger(__name__)

blueprint = Blueprint('oauth', __name__, template_folder='templates')

ENDPOINTS = 'casoauth.endpoints'
SESSION_KEY = 'oauth_session_id'

View = Callable[[], Response]


def init_app(app: Flask) -> None:
    """Build the dispatch table and register the blueprint."""
    app.config.setdefault('OAUTH_PATH_PREFIX', '/oauth2.0')
    app.config.setdefault('ERROR_STATUS_CODE', HTTPStatus.OK)
    endpoints: Dict[Route, View] = {
        Route.AUTHORIZE: authorize,
        Route.CALLBACK_AUTHORIZE: callback_authorize,
        Route.ACCESS_TOKEN: delegate_to('ACCESS_TOKEN_URL'),
        Route.PROFILE: delegate_to('PROFILE_URL'),
    }
    app.extensions[ENDPOINTS] = endpoints
    app.register_blueprint(blueprint,
                           url_prefix=app.config['OAUTH_PATH_PREFIX'])


def register_endpoint(app: Flask, route: Route, view: View) -> None:
    """Handle ``route`` with ``view`` instead of the default."""
    app.extensions[ENDPOINTS][route] = view


@blueprint.route('/<method>', methods=['GET', 'POST'])
def dispatch(method: str) -> Response:
    """Forward the request to the endpoint named by ``method``."""
    try:
        route = Route(method)
    except ValueError as e:
        logger.error('Unknown method : %s', method)
        raise DispatchUnknownMethod(method) from e
    view: View = current_app.extensions[ENDPOINTS][route]
    return view()


def authorize() -> Response:
    """Validate an authorization request, and send the user to log in."""
    data, code, headers = authorize_controller.authorize(
        request.values,
        _session_key(),
        request.base_url,
        current_app.config['CAS_LOGIN_URL']
    )
    return make_response(redirect(headers['Location'], code=code))


def callback_authorize() -> Response:
    """Redirect the user back to the client, or ask them to approve it."""
    data, code, headers = callback_controller.callback_authorize(
        request.values,
        _session_key()
    )
    if code == HTTPStatus.FOUND:
        return make_response(redirect(headers['Location'], code=code))
    content = render_template('casoauth/confirm.html', **data)
    return make_response(content, code, headers)


def delegate_to(config_key: str) -> View:
    """Get a view that hands the request to the upstream URL in config."""
    def delegate() -> Response:
        target = current_app.config[config_key]
        query = request.query_string.decode('utf-8')
        if query:
            target = f'{target}{"&" if "?" in target else "?"}{query}'
        logger.debug('Delegate %s to %s', request.path, target)
        # 307 keeps the method and body of the original request.
        return make_response(
            redirect(target, code=HTTPStatus.TEMPORARY_REDIRECT)
        )
    delegate.__name__ = f'delegate_{config_key.lower()}'
    return delegate


def _session_key() -> str:
    """Get the key for the user's session, creating one if necessary."""
    if SESSION_KEY not in session:
        session[SESSION_KEY] = uuid.uuid4().hex
    key: str = session[SESSION_KEY]
    return key


@blueprint.errorhandler(OAuthRequestError)
def handle_oauth_error(error: OAuthRequestError) -> Response:
    """Render a rejected request as an error view."""
    content = render_template('casoauth/error.html', error=error.error,
                              description=str(error))
    return make_response(content, current_app.config['ERROR_STATUS_CODE'])


@blueprint.errorhandler(DispatchUnknownMethod)
def handle_unknown_method(error: DispatchUnknownMethod) -> Response:
    """Write a plain-text error for a request to an unknown endpoint."""
    response = make_response(f'error={error.error}',
                             current_app.config['ERROR_STATUS_CODE'])
    response.headers['Content-Type'] = 'text/plain'
    return response


@blueprint.after_request
def apply_response_headers(response: Response) -> Response:
    """Prevent UI redress attacks on the approval view."""
    response.headers['Content-Security-Policy'] = "frame-ancestors 'none'"
    response.headers['X-Frame-Options'] = 'DENY'
    return response
