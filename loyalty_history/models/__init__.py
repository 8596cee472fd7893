"""
Database models for the loyalty history service.
"""
from .history import (
    PointEvent,
    TransactionEvent,
    POINT_EVENTS_TABLE,
    TRANSACTIONS_TABLE,
)

__all__ = [
    'PointEvent',
    'TransactionEvent',
    'POINT_EVENTS_TABLE',
    'TRANSACTIONS_TABLE',
]
