"""
Controllers for the authorization bridge.

Each controller takes plain request values and returns a ``(data, status,
headers)`` triple. Rejected requests are signalled by raising an
:class:`casoauth.exceptions.OAuthRequestError`.
"""

from typing import Tuple

ResponseData = Tuple[dict, int, dict]
