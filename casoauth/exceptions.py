"""Errors that terminate an OAuth request."""

INVALID_REQUEST = 'invalid_request'
UNAUTHORIZED_CLIENT = 'unauthorized_client'


class OAuthRequestError(RuntimeError):
    """
    Base class for rejected OAuth requests.

    These are reported to the user agent as an error view; they never result
    in a redirect.
    """

    error = INVALID_REQUEST
    """Machine-readable error code included in the error view."""

    description = 'The request is invalid.'

    def __init__(self, message: str = '') -> None:
        super().__init__(message or self.description)


class MissingParameter(OAuthRequestError):
    """A required request parameter is absent or blank."""

    def __init__(self, parameter: str) -> None:
        self.parameter = parameter
        super().__init__(f'Missing {parameter}')


class UnknownClient(OAuthRequestError):
    """The ``client_id`` does not identify a registered client."""

    error = UNAUTHORIZED_CLIENT
    description = 'Unknown client.'


class RedirectUriMismatch(OAuthRequestError):
    """The ``redirect_uri`` is not allowed for the client."""

    description = 'The redirect URI is not allowed for this client.'


class MissingTransaction(OAuthRequestError):
    """No authorization is in progress for the session."""

    description = 'No authorization request is in progress.'


class DispatchUnknownMethod(OAuthRequestError):
    """The requested sub-path is not an OAuth endpoint."""

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f'Unknown method {method}')
