"""Core domain classes for the authorization bridge."""

from enum import Enum
from typing import NamedTuple, Optional


class RegisteredClient(NamedTuple):
    """An API client registered to obtain authorization codes."""

    client_id: str
    """Public identifier for the API client."""

    service_id: str
    """Pattern that every acceptable redirect URI must fully match."""

    name: str
    """Human-readable name, shown to the user during approval."""

    client_secret: Optional[str] = None
    """Hashed secret; only the access token endpoint uses this."""

    bypass_approval_prompt: bool = False
    """If True, the user is never asked to approve this client."""

    description: Optional[str] = None


class Transaction(NamedTuple):
    """
    An authorization request in flight for a single user session.

    Created when an authorization request is accepted, and consumed when the
    user returns from logging in.
    """

    callback_url: str
    """The validated redirect URI for this request."""

    service_name: str
    """Display name of the client, copied at creation time."""

    bypass_approval_prompt: bool = False
    """Copied from the client at creation time."""

    state: Optional[str] = None
    """Opaque value from the client, echoed back verbatim if present."""


class Route(Enum):
    """Sub-paths handled by the front dispatcher."""

    AUTHORIZE = 'authorize'
    CALLBACK_AUTHORIZE = 'callbackAuthorize'
    ACCESS_TOKEN = 'accessToken'
    PROFILE = 'profile'
