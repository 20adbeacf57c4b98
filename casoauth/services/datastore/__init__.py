"""Database integration for the registry of OAuth clients."""

import logging

from sqlalchemy.exc import SQLAlchemyError

from . import util, models
from ... import domain

logger = logging.getLogger(__name__)


class NoSuchClient(RuntimeError):
    """A client was requested that does not exist."""


class RegistryUnavailable(RuntimeError):
    """The client registry could not be reached."""


init_app = util.init_app
create_all = util.create_all
drop_all = util.drop_all


def save_client(client: domain.RegisteredClient) -> str:
    """
    Persist a :class:`domain.RegisteredClient`.

    If a client with the same ``client_id`` already exists, it is updated in
    place.

    Parameters
    ----------
    client : :class:`domain.RegisteredClient`

    Returns
    -------
    str
        The ``client_id`` of the saved client.

    """
    with util.transaction() as dbsession:
        db_client = dbsession.query(models.DBRegisteredService) \
            .filter(models.DBRegisteredService.client_id == client.client_id) \
            .first()
        if db_client is None:
            db_client = models.DBRegisteredService(client_id=client.client_id)
        db_client.client_secret = client.client_secret
        db_client.service_id = client.service_id
        db_client.name = client.name
        db_client.description = client.description
        db_client.bypass_approval_prompt = client.bypass_approval_prompt
        dbsession.add(db_client)
    return client.client_id


def load_client(client_id: str) -> domain.RegisteredClient:
    """
    Load a :class:`domain.RegisteredClient` from the datastore.

    Raises
    ------
    :class:`NoSuchClient`
        If there is no client with ``client_id``.
    :class:`RegistryUnavailable`
        If the database could not be queried.

    """
    try:
        with util.transaction() as dbsession:
            db_client = _load_dbclient(client_id, dbsession)
            return domain.RegisteredClient(
                client_id=db_client.client_id,
                client_secret=db_client.client_secret,
                service_id=db_client.service_id,
                name=db_client.name,
                description=db_client.description,
                bypass_approval_prompt=bool(db_client.bypass_approval_prompt)
            )
    except SQLAlchemyError as e:
        logger.error('Client registry lookup failed: %s', e)
        raise RegistryUnavailable(f'Could not load client {client_id}') from e


def delete_client(client_id: str) -> None:
    """Remove a client from the datastore."""
    with util.transaction() as dbsession:
        dbsession.delete(_load_dbclient(client_id, dbsession))


def _load_dbclient(client_id: str, dbsession: util.Session) \
        -> models.DBRegisteredService:
    db_client: models.DBRegisteredService = dbsession \
        .query(models.DBRegisteredService) \
        .filter(models.DBRegisteredService.client_id == client_id) \
        .first()
    if db_client is None:
        raise NoSuchClient(f'Client {client_id} does not exist')
    return db_client
