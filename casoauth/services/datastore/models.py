"""SQLAlchemy models for database integration."""

from datetime import datetime

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

db: SQLAlchemy = SQLAlchemy()


class DBRegisteredService(db.Model):
    """Persistence for :class:`domain.RegisteredClient`."""

    __tablename__ = 'oauth_registered_service'

    id = Column(Integer, primary_key=True, autoincrement=True)
    client_id = Column(String(255), unique=True, nullable=False, index=True)
    client_secret = Column(String(255), nullable=True)
    """SHA-256 hex digest of the client secret."""

    service_id = Column(String(2048), nullable=False)
    """Pattern that redirect URIs must fully match."""

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    bypass_approval_prompt = Column(Boolean, nullable=False, default=False)
    created = Column(DateTime, default=datetime.now)
