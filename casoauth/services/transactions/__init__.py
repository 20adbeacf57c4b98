"""
Session-scoped store for authorization transactions.

An authorization transaction bridges the authorize request and the callback
that follows the user's login. It is written under the user's session key,
and consumed (read and deleted in one step) by the callback, so that it can
never be used twice.

The store is attached to the application at start-up with :func:`init_app`;
an alternate :class:`TransactionStore` implementation may be passed in there.
"""

import logging
from functools import wraps
from typing import Dict, Optional

from flask import Flask, current_app
import fakeredis
import redis

from ...domain import Transaction

logger = logging.getLogger(__name__)

EXTENSION_KEY = 'casoauth.transactions'


class TransactionStoreError(RuntimeError):
    """Failed to read or write a transaction in the store."""


class ConfigurationError(RuntimeError):
    """Raised when a required store parameter is missing."""


# Field names are shared with the legacy CAS session attributes.
CALLBACK_URL = 'callbackUrl'
SERVICE_NAME = 'serviceName'
BYPASS_APPROVAL_PROMPT = 'bypassApprovalPrompt'
STATE = 'state'


def _encode(transaction: Transaction) -> Dict[str, str]:
    data = {
        CALLBACK_URL: transaction.callback_url,
        SERVICE_NAME: transaction.service_name,
        BYPASS_APPROVAL_PROMPT:
            'true' if transaction.bypass_approval_prompt else 'false',
    }
    if transaction.state is not None:
        data[STATE] = transaction.state
    return data


def _decode(data: Dict[str, str]) -> Optional[Transaction]:
    if not data or not data.get(CALLBACK_URL):
        return None
    return Transaction(
        callback_url=data[CALLBACK_URL],
        service_name=data.get(SERVICE_NAME, ''),
        bypass_approval_prompt=data.get(BYPASS_APPROVAL_PROMPT) == 'true',
        state=data.get(STATE)
    )


class TransactionStore(object):
    """Get, set, and delete one :class:`.Transaction` per session key."""

    def save(self, session_key: str, transaction: Transaction) -> None:
        """Store ``transaction``, replacing any prior one for the session."""
        raise NotImplementedError('Must be implemented by a child class')

    def load(self, session_key: str) -> Optional[Transaction]:
        """Get the transaction for the session, without removing it."""
        raise NotImplementedError('Must be implemented by a child class')

    def delete(self, session_key: str) -> None:
        """Remove the transaction for the session, if there is one."""
        raise NotImplementedError('Must be implemented by a child class')

    def consume(self, session_key: str) -> Optional[Transaction]:
        """Get and remove the transaction for the session."""
        transaction = self.load(session_key)
        self.delete(session_key)
        return transaction


class RedisTransactionStore(TransactionStore):
    """
    Keeps transactions in Redis, as one hash per session.

    The StrictRedis instance is thread safe and connections are attached at
    the time a command is executed, so a single instance is shared by all
    requests to the application.
    """

    def __init__(self, r: redis.StrictRedis, prefix: str = '',
                 duration: int = 7200) -> None:
        """Wrap a connection to Redis."""
        self.r = r
        self._prefix = prefix
        self._duration = duration

    def _key(self, session_key: str) -> str:
        return f'{self._prefix}{session_key}'

    def save(self, session_key: str, transaction: Transaction) -> None:
        key = self._key(session_key)
        try:
            with self.r.pipeline() as pipe:
                pipe.delete(key)
                pipe.hset(key, mapping=_encode(transaction))
                pipe.expire(key, self._duration)
                pipe.execute()
        except redis.exceptions.ConnectionError as e:
            raise TransactionStoreError(f'Connection failed: {e}') from e
        except redis.exceptions.RedisError as e:
            raise TransactionStoreError(f'Failed to save: {e}') from e
        logger.debug('Saved transaction for session %s', session_key)

    def load(self, session_key: str) -> Optional[Transaction]:
        try:
            data = self.r.hgetall(self._key(session_key))
        except redis.exceptions.RedisError as e:
            raise TransactionStoreError(f'Failed to load: {e}') from e
        return _decode(data)

    def delete(self, session_key: str) -> None:
        try:
            self.r.delete(self._key(session_key))
        except redis.exceptions.RedisError as e:
            raise TransactionStoreError(f'Failed to delete: {e}') from e

    def consume(self, session_key: str) -> Optional[Transaction]:
        """Read and delete the transaction in a single MULTI/EXEC block."""
        key = self._key(session_key)
        try:
            with self.r.pipeline() as pipe:
                pipe.hgetall(key)
                pipe.delete(key)
                data, _ = pipe.execute()
        except redis.exceptions.RedisError as e:
            raise TransactionStoreError(f'Failed to consume: {e}') from e
        transaction = _decode(data)
        if transaction is None:
            logger.debug('No transaction for session %s', session_key)
        return transaction


def init_app(app: Flask, store: Optional[TransactionStore] = None) -> None:
    """Set configuration defaults, and optionally attach a store."""
    app.config.setdefault('REDIS_HOST', 'localhost')
    app.config.setdefault('REDIS_PORT', '6379')
    app.config.setdefault('REDIS_DATABASE', '0')
    app.config.setdefault('REDIS_TOKEN', None)
    app.config.setdefault('REDIS_FAKE', False)
    app.config.setdefault('TRANSACTION_KEY_PREFIX', 'oauth20:transaction:')
    app.config.setdefault('SESSION_DURATION', '7200')
    if store is not None:
        app.extensions[EXTENSION_KEY] = store


def get_redis_store(app: Flask) -> RedisTransactionStore:
    """Get a new :class:`.RedisTransactionStore` configured for ``app``."""
    try:
        host = app.config['REDIS_HOST']
        port = int(app.config['REDIS_PORT'])
        db = int(app.config['REDIS_DATABASE'])
    except (KeyError, ValueError) as e:
        raise ConfigurationError('Missing required config parameter') from e
    password = app.config.get('REDIS_TOKEN')
    prefix = app.config.get('TRANSACTION_KEY_PREFIX', '')
    duration = int(app.config.get('SESSION_DURATION', '7200'))
    if app.config.get('REDIS_FAKE'):
        logger.debug('Using FakeRedis for transactions')
        r = fakeredis.FakeStrictRedis(decode_responses=True)
    else:
        logger.debug('New Redis connection at %s, port %s', host, port)
        r = redis.StrictRedis(host=host, port=port, db=db,
                              password=password, decode_responses=True)
    return RedisTransactionStore(r, prefix=prefix, duration=duration)


def current_store() -> TransactionStore:
    """Get/create the :class:`.TransactionStore` for the current app."""
    app = current_app._get_current_object()     # type: ignore
    if EXTENSION_KEY not in app.extensions:
        app.extensions[EXTENSION_KEY] = get_redis_store(app)
    store: TransactionStore = app.extensions[EXTENSION_KEY]
    return store


@wraps(TransactionStore.save)
def save(session_key: str, transaction: Transaction) -> None:
    """Store a transaction for the session."""
    return current_store().save(session_key, transaction)


@wraps(TransactionStore.load)
def load(session_key: str) -> Optional[Transaction]:
    """Get the transaction for the session, without removing it."""
    return current_store().load(session_key)


@wraps(TransactionStore.delete)
def delete(session_key: str) -> None:
    """Remove the transaction for the session."""
    return current_store().delete(session_key)


@wraps(TransactionStore.consume)
def consume(session_key: str) -> Optional[Transaction]:
    """Get and remove the transaction for the session."""
    return current_store().consume(session_key)
