"""Database access for orders."""

from .session import SessionManager
from .store import OrderStore

__all__ = ['SessionManager', 'OrderStore']
