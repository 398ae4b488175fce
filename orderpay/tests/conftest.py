"""Shared test fixtures and utilities."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from ..db import OrderStore, SessionManager
from ..db.models import Base
from ..domain import CommandResult
from ..processors.base import OrderUpdater

class RecordingUpdater(OrderUpdater):
    """In-memory persistence collaborator that remembers every command.

    Orders listed in ``fail_for`` get a failed result, orders listed in
    ``raise_for`` make the call raise.
    """

    def __init__(self, fail_for=(), raise_for=()):
        self.fail_for = set(fail_for)
        self.raise_for = set(raise_for)
        self.calls = []
        self.stored = {}

    def submit_order_update(self, order_id, command):
        self.calls.append((order_id, command))
        if order_id in self.raise_for:
            raise ConnectionError('backend unreachable')
        if order_id in self.fail_for:
            return CommandResult(success=False, error='write rejected')
        self.stored[order_id] = command
        return CommandResult(success=True)

@pytest.fixture
def updater():
    """Collaborator that accepts every update."""
    return RecordingUpdater()

@pytest.fixture
def engine():
    """Create a test database engine."""
    engine = create_engine(
        'sqlite://',
        poolclass=StaticPool,
        connect_args={'check_same_thread': False}
    )
    Base.metadata.create_all(engine)
    return engine

@pytest.fixture
def session_manager(engine):
    """Create a session manager for testing."""
    return SessionManager(engine=engine)

@pytest.fixture
def store(session_manager):
    """Order store backed by the in-memory database."""
    return OrderStore(session_manager)
