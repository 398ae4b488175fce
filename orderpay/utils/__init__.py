"""Utility functions and helpers."""

from .money import to_decimal, round2, format_amount, covers, EPSILON, ZERO
from .uuid import generate_uuid

__all__ = [
    'to_decimal',
    'round2',
    'format_amount',
    'covers',
    'EPSILON',
    'ZERO',
    'generate_uuid'
]
