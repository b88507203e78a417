"""
Optimistic edit wrapper.

A ``Tracked`` value holds the last server-confirmed value and, while an edit
is in flight, the pending one. Consumers only ever read ``displayed``.
"""

from dataclasses import dataclass, replace
from typing import Generic, Optional, TypeVar

T = TypeVar('T')


@dataclass(frozen=True)
class Tracked(Generic[T]):
    confirmed: T
    pending: Optional[T] = None

    @property
    def displayed(self) -> T:
        return self.pending if self.pending is not None else self.confirmed

    @property
    def has_pending(self) -> bool:
        return self.pending is not None

    def propose(self, value: T) -> 'Tracked[T]':
        return replace(self, pending=value)

    def confirm(self) -> 'Tracked[T]':
        """Promote the pending value to confirmed"""
        if self.pending is None:
            return self
        return Tracked(confirmed=self.pending)

    def rollback(self) -> 'Tracked[T]':
        """Drop the pending value"""
        return Tracked(confirmed=self.confirmed)
