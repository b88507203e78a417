"""
Services module for the budget dashboard.

This module contains the aggregation store and the derived view functions.
"""

from .derived_views import DerivedViewBuilder
from .aggregation_store import AggregationStore, Notice, STORE_CHANGED

__all__ = [
    'AggregationStore',
    'DerivedViewBuilder',
    'Notice',
    'STORE_CHANGED'
]
