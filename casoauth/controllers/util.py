"""URL helpers for the authorization flow."""

from typing import Optional
from urllib.parse import urlencode

from ..domain import Route


def add_parameter(url: str, name: str, value: Optional[str]) -> str:
    """
    Append a single query parameter to ``url``.

    The parameter is joined with ``&`` if ``url`` already has a query string,
    and with ``?`` otherwise. The value is form-urlencoded; ``None`` is
    appended as an empty value.
    """
    separator = '&' if '?' in url else '?'
    return f'{url}{separator}{urlencode({name: value or ""})}'


def callback_authorize_url(request_url: str) -> str:
    """
    Get the callback URL that corresponds to an authorize request URL.

    The last ``/authorize`` path segment is swapped for
    ``/callbackAuthorize``; scheme, host, and prefix are left as they are.
    """
    authorize = f'/{Route.AUTHORIZE.value}'
    head, sep, tail = request_url.rpartition(authorize)
    if not sep:
        return request_url
    return f'{head}/{Route.CALLBACK_AUTHORIZE.value}{tail}'


def is_blank(value: Optional[str]) -> bool:
    """True if ``value`` is None, empty, or only whitespace."""
    return value is None or not value.strip()
