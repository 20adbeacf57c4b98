"""Application factory for the authorization bridge."""

from typing import Optional

from flask import Flask, Response, jsonify
from werkzeug.exceptions import HTTPException, Forbidden, Unauthorized, \
    BadRequest, MethodNotAllowed, InternalServerError, NotFound

from . import routes
from .app_logging import setup_logger
from .services import datastore, transactions
from .services.transactions import TransactionStore


def create_web_app(store: Optional[TransactionStore] = None) -> Flask:
    """
    Initialize and configure the authorization bridge.

    Parameters
    ----------
    store : :class:`.TransactionStore` or None
        Where to keep authorization transactions. If None, a Redis store is
        created from the application config on first use.

    """
    app = Flask('casoauth')
    app.config.from_pyfile('config.py')
    setup_logger(app)

    datastore.init_app(app)
    transactions.init_app(app, store=store)
    routes.init_app(app)

    if app.config['CREATE_DB']:
        with app.app_context():
            datastore.create_all()

    register_error_handlers(app)
    return app


def register_error_handlers(app: Flask) -> None:
    """Register error handlers for the Flask app."""
    app.errorhandler(Forbidden)(jsonify_exception)
    app.errorhandler(Unauthorized)(jsonify_exception)
    app.errorhandler(BadRequest)(jsonify_exception)
    app.errorhandler(InternalServerError)(jsonify_exception)
    app.errorhandler(NotFound)(jsonify_exception)
    app.errorhandler(MethodNotAllowed)(jsonify_exception)


def jsonify_exception(error: HTTPException) -> Response:
    """Render exceptions as JSON."""
    exc_resp = error.get_response()
    response: Response = jsonify(reason=error.description)
    response.status_code = exc_resp.status_code
    return response
