"""
Base command infrastructure for the orderpay CLI.
Provides common functionality and utilities for all commands.
"""

import click
import logging
import time
from abc import ABC, abstractmethod
from functools import wraps
from pathlib import Path
from typing import Optional

from .config import Config
from ..db.session import SessionManager
from ..db.store import OrderStore
from ..processors.error_tracker import ErrorTracker

class BaseCommand(ABC):
    """Base class for all CLI commands."""
    
    def __init__(self, config: Config):
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)
        self.error_tracker = ErrorTracker()
        self._store = None
        
        # Get debug status from click context
        ctx = click.get_current_context(silent=True)
        self.debug = bool(ctx and ctx.obj and ctx.obj.get('debug'))
        if self.debug:
            self.logger.debug(f"Debug mode enabled for {self.__class__.__name__}")
    
    @property
    def store(self) -> OrderStore:
        """Get or create the order store."""
        if self._store is None:
            if self.debug:
                self.logger.debug(f"Creating new engine for {self.config.database_url}")
            self._store = OrderStore(SessionManager(self.config.database_url))
        return self._store
    
    def money(self, amount) -> str:
        """Format an amount for display."""
        return f"{self.config.currency_symbol}{amount:.2f}"
    
    @abstractmethod
    def execute(self) -> Optional[int]:
        """Execute the command. Must be implemented by subclasses."""
        pass
    
    def validate(self) -> bool:
        """Validate command configuration and requirements.
        
        Returns:
            bool: True if validation passes, False otherwise
        """
        if self.debug:
            self.logger.debug("Validating command configuration")
        return True

class FileInputCommand(BaseCommand):
    """Base class for commands that process input files."""
    
    def __init__(self, config: Config, input_file: Path, output_file: Optional[Path] = None):
        super().__init__(config)
        self.input_file = input_file
        self.output_file = output_file
    
    def validate(self) -> bool:
        """Validate input file exists and is readable."""
        if not super().validate():
            return False
            
        if not self.input_file.exists():
            self.logger.error(f"Input file not found: {self.input_file}")
            return False
            
        if not self.input_file.is_file():
            self.logger.error(f"Input path is not a file: {self.input_file}")
            return False
            
        return True

def command_error_handler(f):
    """Decorator to handle command execution errors consistently."""
    @wraps(f)
    def wrapper(self, *args, **kwargs):
        start = time.time()
        try:
            if self.debug:
                self.logger.debug(f"Starting command execution: {f.__name__}")
            
            result = f(self, *args, **kwargs)
            
            if self.debug:
                self.logger.debug(f"Command completed in {time.time() - start:.3f}s")
            
            return result
            
        except Exception as e:
            self.error_tracker.add_error(
                'COMMAND_EXECUTION_ERROR',
                f"Command failed: {str(e)}",
                {
                    'command': f.__name__,
                    'args': str(args),
                    'kwargs': str(kwargs),
                    'error': str(e)
                }
            )
            self.error_tracker.log_summary(self.logger)
            if self.debug:
                self.logger.debug(f"Command failed with error: {str(e)}", exc_info=True)
            raise click.Abort()
    return wrapper
