"""
OAuth2 authorization bridge for CAS

The bridge is a Flask application that lets registered API clients obtain an
authorization code tied to a user's CAS single-sign-on session. A client sends
the user to ``/oauth2.0/authorize``; the bridge validates the request against
the client registry, records an authorization transaction for the user's
session, and sends the user to the CAS login page. When CAS sends the user
back to ``/oauth2.0/callbackAuthorize`` with a service ticket, the bridge
consumes the transaction and redirects the user to the client's redirect URI
with the ticket as the ``code`` parameter, optionally after asking the user to
approve the client.

Client records live in a relational datastore
(:mod:`casoauth.services.datastore`). Authorization transactions live in a
Redis-backed store keyed by session (:mod:`casoauth.services.transactions`).
The access token and profile endpoints belong to the CAS server; the bridge
only forwards requests for them.
"""
