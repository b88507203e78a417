"""
Client-side budget dashboard.

This package mirrors transactions, budgets and month summaries from the
budget service, keeps them consistent across month changes and optimistic
edits, and derives chart-ready views from them.
"""

from .api import (
    RemoteDataSource,
    Result,
    APIError,
    NetworkError,
    HttpStatusError,
    AuthenticationError,
    MalformedResponseError
)

from .models import (
    AccountFormat,
    BudgetStatus,
    Category,
    CategorySummary,
    Totals,
    Transaction
)

from .session import Session, SessionGate, TokenStorage

from .services import AggregationStore, DerivedViewBuilder, Notice

from .container import Container

__all__ = [
    # Transport
    'RemoteDataSource',
    'Result',
    'APIError',
    'NetworkError',
    'HttpStatusError',
    'AuthenticationError',
    'MalformedResponseError',

    # Models
    'AccountFormat',
    'BudgetStatus',
    'Category',
    'CategorySummary',
    'Totals',
    'Transaction',

    # Session
    'Session',
    'SessionGate',
    'TokenStorage',

    # Store
    'AggregationStore',
    'DerivedViewBuilder',
    'Notice',

    # Dependency Injection
    'Container'
]
