"""
API clients for the budget service.

This module provides the transport boundary: error classes, the result type
and the remote data source.
"""

# Import error classes
from .errors import (
    APIError,
    NetworkError,
    TransportError,
    HttpStatusError,
    ServerRejection,
    AuthenticationError,
    MalformedResponseError
)

from .result import Result

# Import request handler
from .request_handler import RequestHandler

# Import base client
from .base_client import BaseAPIClient

# Import specialized API clients
from .summary_api import SummaryAPI
from .transactions_api import TransactionsAPI
from .budgets_api import BudgetsAPI
from .uploads_api import UploadsAPI

from .remote_data_source import RemoteDataSource

__all__ = [
    # Base classes
    'BaseAPIClient',
    'RequestHandler',
    'Result',

    # Error classes
    'APIError',
    'NetworkError',
    'TransportError',
    'HttpStatusError',
    'ServerRejection',
    'AuthenticationError',
    'MalformedResponseError',

    # Remote data source
    'RemoteDataSource',

    # Specialized API clients
    'SummaryAPI',
    'TransactionsAPI',
    'BudgetsAPI',
    'UploadsAPI'
]
