"""Database session management."""
import logging
from typing import Optional
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

class SessionManager:
    """Manages database sessions."""
    
    def __init__(self, database_url: Optional[str] = None, engine=None):
        """Initialize session manager with database URL or an existing engine."""
        self.engine = engine if engine is not None else create_engine(database_url)
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine
        )
        self.logger = logging.getLogger(__name__)
        
    def get_session(self) -> Session:
        """Get a new database session."""
        session = self.SessionLocal()
        self.logger.debug(f"Created new session: {id(session)}")
        return session
        
    def __enter__(self) -> Session:
        """Context manager entry."""
        self.session = self.get_session()
        return self.session
        
    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        try:
            if exc_type is None:
                self.session.commit()
            else:
                self.logger.warning(f"Rolling back order changes after {exc_type.__name__}: {exc_val}")
                self.session.rollback()
        finally:
            self.session.close()
