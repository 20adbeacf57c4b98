"""
Controller for the authorize endpoint.

A client application sends the user here to request an authorization code.
The request is checked against the client registry; if it is acceptable, the
details are kept as a transaction for the user's session and the user is sent
to CAS to log in. CAS returns the user to the callback endpoint (see
:mod:`.callback`), which picks the transaction back up.
"""

import logging
import re
from http import HTTPStatus
from typing import Mapping

from ..domain import RegisteredClient, Transaction
from ..exceptions import MissingParameter, UnknownClient, RedirectUriMismatch
from ..services import datastore, transactions
from . import ResponseData
from .util import add_parameter, callback_authorize_url, is_blank

logger = logging.getLogger(__name__)

CLIENT_ID = 'client_id'
REDIRECT_URI = 'redirect_uri'
STATE = 'state'
SERVICE = 'service'


def authorize(params: Mapping[str, str], session_key: str, request_url: str,
              login_url: str) -> ResponseData:
    """
    Validate an authorization request and send the user to log in.

    Parameters
    ----------
    params : Mapping
        Request parameters; should include ``client_id`` and
        ``redirect_uri``, and may include ``state``.
    session_key : str
        Identifies the user's session in the transaction store.
    request_url : str
        URL of the current request, without the query string. Used to
        derive the callback URL.
    login_url : str
        The CAS login URL.

    Returns
    -------
    dict
        Additional data to add to the response.
    int
        Status code. This should be 302 (Found) if all goes well.
    dict
        Headers to add to the response.

    Raises
    ------
    :class:`MissingParameter`
    :class:`UnknownClient`
    :class:`RedirectUriMismatch`

    """
    client_id = params.get(CLIENT_ID)
    logger.debug('%s : %s', CLIENT_ID, client_id)
    redirect_uri = params.get(REDIRECT_URI)
    logger.debug('%s : %s', REDIRECT_URI, redirect_uri)
    state = params.get(STATE)
    logger.debug('%s : %s', STATE, state)

    if is_blank(client_id):
        logger.error('Missing %s', CLIENT_ID)
        raise MissingParameter(CLIENT_ID)
    if is_blank(redirect_uri):
        logger.error('Missing %s', REDIRECT_URI)
        raise MissingParameter(REDIRECT_URI)

    client = _get_client(client_id)
    if not redirect_uri_allowed(client, redirect_uri):
        logger.error('Unsupported %s : %s for serviceId : %s',
                     REDIRECT_URI, redirect_uri, client.service_id)
        raise RedirectUriMismatch(f'Unsupported {REDIRECT_URI}')

    # Any transaction already in flight for this session is replaced.
    transactions.save(session_key, Transaction(
        callback_url=redirect_uri,
        service_name=client.name,
        bypass_approval_prompt=client.bypass_approval_prompt,
        state=state
    ))

    callback_url = callback_authorize_url(request_url)
    logger.debug('callbackAuthorize : %s', callback_url)
    location = add_parameter(login_url, SERVICE, callback_url)
    logger.debug('loginUrlWithService : %s', location)
    return {}, HTTPStatus.FOUND, {'Location': location}


def redirect_uri_allowed(client: RegisteredClient, redirect_uri: str) -> bool:
    """Check that ``redirect_uri`` fully matches the client's service id."""
    try:
        return re.fullmatch(client.service_id, redirect_uri) is not None
    except re.error as e:
        logger.error('Invalid serviceId pattern for client %s: %s',
                     client.client_id, e)
        return False


def _get_client(client_id: str) -> RegisteredClient:
    try:
        return datastore.load_client(client_id)
    except datastore.NoSuchClient as e:
        logger.error('Unknown %s : %s', CLIENT_ID, client_id)
        raise UnknownClient(f'Unknown {CLIENT_ID}') from e
    except datastore.RegistryUnavailable as e:
        logger.error('Could not look up %s : %s', CLIENT_ID, client_id)
        raise UnknownClient(f'Unknown {CLIENT_ID}') from e
