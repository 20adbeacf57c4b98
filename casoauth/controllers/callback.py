"""Controller for the return leg of the authorization flow."""

import logging
from http import HTTPStatus
from typing import Mapping

from ..exceptions import MissingParameter, MissingTransaction
from ..services import transactions
from . import ResponseData
from .util import add_parameter, is_blank

logger = logging.getLogger(__name__)

TICKET = 'ticket'
CODE = 'code'
STATE = 'state'


def callback_authorize(params: Mapping[str, str],
                       session_key: str) -> ResponseData:
    """
    Deliver the authorization code to the client, or ask for approval.

    The CAS service ticket issued at login is used as the authorization code.
    The transaction for the session is removed whether or not the request
    succeeds, so a callback can never be replayed.

    Parameters
    ----------
    params : Mapping
        Request parameters; should include ``ticket``.
    session_key : str
        Identifies the user's session in the transaction store.

    Returns
    -------
    dict
        If approval is required, ``callbackUrl`` and ``serviceName`` for the
        approval view. Otherwise empty.
    int
        302 (Found) if the client bypasses approval, else 200 (OK).
    dict
        Headers to add to the response.

    Raises
    ------
    :class:`MissingTransaction`
    :class:`MissingParameter`

    """
    ticket = params.get(TICKET)
    logger.debug('%s : %s', TICKET, ticket)

    transaction = transactions.consume(session_key)
    if transaction is None:
        logger.error('callbackUrl is missing from the session and can not be'
                     ' retrieved.')
        raise MissingTransaction()
    logger.debug('callbackUrl : %s', transaction.callback_url)
    logger.debug('state : %s', transaction.state)

    if is_blank(ticket):
        logger.error('Missing %s', TICKET)
        raise MissingParameter(TICKET)

    callback_url = add_parameter(transaction.callback_url, CODE, ticket)
    if transaction.state is not None:
        callback_url = add_parameter(callback_url, STATE, transaction.state)
    logger.debug('callbackUrl : %s', callback_url)

    logger.debug('bypassApprovalPrompt : %s',
                 transaction.bypass_approval_prompt)
    # Clients that auto-approve do not need authorization.
    if transaction.bypass_approval_prompt:
        logger.debug('Redirect to callback based on bypassApprovalPrompt')
        return {}, HTTPStatus.FOUND, {'Location': callback_url}

    logger.debug('serviceName : %s', transaction.service_name)
    data = {
        'callbackUrl': callback_url,
        'serviceName': transaction.service_name
    }
    return data, HTTPStatus.OK, {}
