"""
Result type returned across the RemoteDataSource boundary.
"""

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from .errors import APIError, HttpStatusError

T = TypeVar('T')


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a typed success payload or a classified failure"""
    value: Optional[T] = None
    error: Optional[APIError] = None

    @classmethod
    def success(cls, value: Any = None) -> 'Result':
        return cls(value=value)

    @classmethod
    def failure(cls, error: APIError) -> 'Result':
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        """
        User-facing description of the failure.

        Returns the server's detail when one was supplied, otherwise a generic
        description keyed by the failure kind. Empty for successful results.
        """
        if self.error is None:
            return ""
        if isinstance(self.error, HttpStatusError) and self.error.server_message:
            return self.error.server_message
        return self.error.generic_message
