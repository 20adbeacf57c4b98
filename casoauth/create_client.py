"""
Script for registering a new OAuth client.

Prints the client ID and secret. The secret is stored only as a hash, so it
cannot be shown again.
"""

import hashlib
import re

import click
from authlib.common.security import generate_token

from .domain import RegisteredClient
from .factory import create_web_app
from .services import datastore


@click.command()
@click.option('--name', prompt='Client name shown to users')
@click.option('--service_id', prompt='Redirect URI pattern (regex)')
@click.option('--description', prompt='What is it', default='')
@click.option('--bypass/--no-bypass', default=False,
              help='Skip the approval prompt for this client.')
@click.option('--client_id', default=None,
              help='Use this client ID instead of generating one.')
def create_client(name: str, service_id: str, description: str,
                  bypass: bool, client_id: str) -> None:
    """Register a new OAuth client."""
    try:
        re.compile(service_id)
    except re.error as e:
        raise click.BadParameter(f'Not a valid pattern: {e}',
                                 param_hint='--service_id') from e

    app = create_web_app()
    with app.app_context():
        datastore.create_all()

        client_id = client_id or generate_token(24)
        secret = generate_token(48)
        hashed = hashlib.sha256(secret.encode('utf-8')).hexdigest()
        datastore.save_client(RegisteredClient(
            client_id=client_id,
            client_secret=hashed,
            service_id=service_id,
            name=name,
            description=description or None,
            bypass_approval_prompt=bypass
        ))

    click.echo(f'Created client {name} with ID {client_id} and secret'
               f' {secret}')


if __name__ == '__main__':
    create_client()
