"""Exceptions raised by the pricing and payment engine."""

class OrderPayError(Exception):
    """Base class for engine errors."""

class PaymentValidationError(OrderPayError, ValueError):
    """Input rejected before any ledger mutation was attempted."""
