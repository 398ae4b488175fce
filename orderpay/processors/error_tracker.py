"""Error tracking and aggregation for payment processors."""

from collections import defaultdict
from typing import Dict, List, Optional, Set
import logging

class ErrorTracker:
    """Track and aggregate errors during processing."""
    
    def __init__(self, max_samples: int = 3):
        """Initialize error tracker.
        
        Args:
            max_samples: Maximum number of samples to store per error type
        """
        self.error_counts = defaultdict(int)
        self.error_samples = defaultdict(list)
        self.max_samples = max_samples
        self.seen_errors: Set[str] = set()
        self.failed_orders: List[str] = []
        
    def add_error(self, error_type: str, message: str, context: Optional[Dict] = None) -> None:
        """Add an error occurrence.
        
        Repeats of an identical type/message pair are counted once.
        
        Args:
            error_type: Category/type of error
            message: Error message
            context: Optional context data; an ``order_id`` key marks that
                order as failed
        """
        order_id = (context or {}).get('order_id')
        if order_id is not None and order_id not in self.failed_orders:
            self.failed_orders.append(order_id)

        error_key = f"{error_type}:{message}"
        if error_key in self.seen_errors:
            return
        
        self.seen_errors.add(error_key)
        self.error_counts[error_type] += 1
        if len(self.error_samples[error_type]) < self.max_samples:
            self.error_samples[error_type].append({
                'message': message,
                'context': context or {}
            })
    
    @property
    def has_errors(self) -> bool:
        return bool(self.error_counts)
    
    def get_summary(self) -> Dict:
        """Get error summary.
        
        Returns:
            Dict containing error counts, samples and failed order ids
        """
        return {
            'counts': dict(self.error_counts),
            'samples': dict(self.error_samples),
            'failed_orders': list(self.failed_orders)
        }
    
    def log_summary(self, logger: logging.Logger) -> None:
        """Log error summary.
        
        Args:
            logger: Logger to use for output
        """
        if not self.error_counts:
            return
            
        logger.warning("Error Summary:")
        if self.failed_orders:
            logger.warning(f"Failed orders: {', '.join(self.failed_orders)}")
        for error_type, count in self.error_counts.items():
            logger.warning(f"{error_type} ({count} occurrences):")
            for i, sample in enumerate(self.error_samples[error_type], 1):
                logger.warning(f"  Sample {i}: {sample['message']}")
                for key, value in sample['context'].items():
                    logger.warning(f"    {key}: {value}")
