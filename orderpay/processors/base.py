"""Base processor for payment operations that talk to persistence."""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Any
import logging
import time

from ..domain.orders import CommandResult, UpdateCommand
from .error_tracker import ErrorTracker

class ProcessingStats:
    """Statistics for processing operations."""
    
    def __init__(self):
        """Initialize stats with default values."""
        self._stats = {
            'attempted': 0,
            'applied': 0,
            'failed': 0,
            'skipped': 0,
            'db_operation_time': 0.0,
            'started_at': datetime.utcnow(),
            'completed_at': None
        }
    
    def __getitem__(self, key: str) -> Any:
        """Get stat value by key."""
        return self._stats[key]
    
    def __setitem__(self, key: str, value: Any) -> None:
        """Set stat value by key."""
        self._stats[key] = value
    
    def __getattr__(self, name: str) -> Any:
        """Get stat value by attribute name."""
        if name.startswith('__'):
            raise AttributeError(name)
        try:
            return self._stats[name]
        except KeyError:
            # Create new stat with default value 0
            self._stats[name] = 0
            return 0
    
    def __setattr__(self, name: str, value: Any) -> None:
        """Set stat value by attribute name."""
        if name == '_stats':
            super().__setattr__(name, value)
        else:
            self._stats[name] = value
    
    def update(self, values: Dict[str, Any]) -> None:
        """Add extra stats."""
        self._stats.update(values)
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert stats to dictionary format."""
        result = {}
        for key, value in self._stats.items():
            if isinstance(value, datetime):
                result[key] = value.isoformat()
            elif isinstance(value, float):
                result[key] = round(value, 3)
            else:
                result[key] = value
        return result

class OrderUpdater(ABC):
    """Persistence collaborator that applies payment updates to stored orders."""
    
    @abstractmethod
    def submit_order_update(self, order_id: str, command: UpdateCommand) -> CommandResult:
        """Persist ``paymentType`` and ``isPaid`` for one order.
        
        Args:
            order_id: Order primary key
            command: Update to apply
            
        Returns:
            CommandResult telling whether the update was stored
        """
        pass

class BaseProcessor(ABC):
    """Abstract base class for payment processors."""
    
    def __init__(self, updater: OrderUpdater, debug: bool = False):
        """Initialize processor with its persistence collaborator.
        
        Args:
            updater: Receives one update command per order
            debug: Enable debug logging
        """
        self.updater = updater
        self.debug = debug
        self.logger = logging.getLogger(self.__class__.__name__)
        self.stats = ProcessingStats()
        self.error_tracker = ErrorTracker()
        
        if self.debug:
            self.logger.debug(f"Initialized {self.__class__.__name__} with {updater.__class__.__name__}")
    
    def submit(self, command: UpdateCommand) -> CommandResult:
        """Send a command to the collaborator; raised errors become failed results.
        
        Args:
            command: Update for a single order
            
        Returns:
            CommandResult from the collaborator
        """
        start = time.time()
        try:
            result = self.updater.submit_order_update(command.order_id, command)
        except Exception as e:
            self.logger.error(f"Update of order {command.order_id} raised: {str(e)}")
            result = CommandResult(success=False, error=str(e))
        
        self.stats.db_operation_time += time.time() - start
        if self.debug:
            self.logger.debug(f"Order {command.order_id} update {command.to_dict()} -> success={result.success}")
        return result
    
    def get_stats(self) -> Dict[str, Any]:
        """Get processing statistics."""
        self.stats.completed_at = datetime.utcnow()
        return self.stats.to_dict()
