"""
Aggregation store for the budget dashboard.

This module provides the single owner of the client copies of transactions,
budgets and the month summary. It orchestrates fetch and edit cycles through
the remote data source and recomputes derived views whenever one of their
inputs changes.

All state transitions run synchronously on the event loop; the only
suspension points are the calls into the remote data source, which run in a
worker thread.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, BinaryIO, Callable, Dict, FrozenSet, List, Optional, Sequence, Tuple

import structlog

from ..api.errors import AuthenticationError
from ..api.remote_data_source import RemoteDataSource
from ..api.result import Result
from ..models.budget import BudgetMap, Totals, normalize_budget_map
from ..models.category import Summary, is_known_category
from ..models.tracked import Tracked
from ..models.transaction import Transaction
from ..models.upload import AccountFormat, UploadResult
from ..models.views import BarEntry, BudgetStatus, BudgetUsage, PieSlice
from ..session import LOGGED_IN, LOGGED_OUT, SESSION_RESTORED, SessionGate
from ..utils.date_utils import MonthFormatter
from ..utils.events import Event, EventBus
from ..utils.money import to_decimal
from .derived_views import DerivedViewBuilder

STORE_CHANGED = "store_changed"


@dataclass(frozen=True)
class Notice:
    """A non-fatal message for the user"""
    level: str
    operation: str
    message: str


class AggregationStore:
    """
    Single source of truth for the selected month's data.

    Month-scoped results are applied only if their month is still the
    current selection when they arrive, and every result is dropped if the
    session changed in the meantime. Category edits are applied optimistically
    and reconciled with the server reply; edits to the same transaction run one
    after another.

    Consumers call ``subscribe`` to be told which fields changed after each
    state transition.
    """

    def __init__(self,
                 data_source: RemoteDataSource,
                 session_gate: SessionGate,
                 initial_month: Optional[str] = None):
        """
        Initialize the aggregation store.

        Args:
            data_source: Transport used for every fetch and mutation
            session_gate: Session owner; a logout clears the store
            initial_month: Month shown before any selection (defaults to
                the current calendar month)
        """
        self._source = data_source
        self._gate = session_gate
        self._initial_month = initial_month
        self._log = structlog.get_logger(__name__)
        self._events = EventBus()
        self._derived: Dict[str, Tuple[Tuple[str, ...], Callable[..., Any]]] = {}
        self._derived_values: Dict[str, Any] = {}
        self._edit_locks: Dict[int, Tuple[asyncio.Lock, int]] = {}
        self._generation = 0

        for name, value in self._empty_fields().items():
            setattr(self, f'_{name}', value)

        self.derive('totals', ('summary',), DerivedViewBuilder.compute_totals)
        self.derive('pie_series', ('summary',), DerivedViewBuilder.to_pie_series)
        self.derive('bar_series', ('summary',), DerivedViewBuilder.to_bar_series)
        self.derive('category_statuses', ('summary',), DerivedViewBuilder.category_statuses)
        self.derive('budget_usage', ('totals',), DerivedViewBuilder.budget_usage)

        self._unsubscribe_session = self._gate.subscribe(self._on_session_event)

    # State plumbing

    def _default_month(self) -> str:
        return self._initial_month or MonthFormatter.current_month()

    def _empty_fields(self) -> Dict[str, Any]:
        return {
            'current_month': self._default_month(),
            'month_explicit': False,
            'auto_selected': False,
            'summary': {},
            'summary_cache': {},
            'transactions': [],
            'budgets': {},
            'budget_draft': None,
            'available_months': [],
            'notices': [],
            'in_flight': 0,
        }

    def _read(self, name: str) -> Any:
        if name in self._derived:
            return self._derived_values[name]
        return getattr(self, f'_{name}')

    def _commit(self, **changes: Any) -> None:
        """Apply field changes, recompute affected views, notify subscribers"""
        for name, value in changes.items():
            setattr(self, f'_{name}', value)

        changed = set(changes)
        for name, (inputs, func) in self._derived.items():
            if changed.intersection(inputs):
                self._derived_values[name] = func(*(self._read(i) for i in inputs))
                changed.add(name)

        self._events.publish(STORE_CHANGED, {'fields': frozenset(changed)})

    def derive(self, name: str, inputs: Sequence[str], func: Callable[..., Any]) -> None:
        """
        Declare a derived view.

        ``func`` is called with the current values of ``inputs`` (store fields
        or previously declared views) and its result is recomputed whenever any
        of them changes.

        Raises:
            ValueError: If the name is taken or an input is unknown
        """
        if name in self._derived or hasattr(self, f'_{name}'):
            raise ValueError(f"Derived view name already in use: {name}")
        for source in inputs:
            if source not in self._derived and not hasattr(self, f'_{source}'):
                raise ValueError(f"Unknown input for derived view {name}: {source}")

        self._derived[name] = (tuple(inputs), func)
        self._derived_values[name] = func(*(self._read(i) for i in inputs))

    def view(self, name: str) -> Any:
        """Current value of a derived view"""
        return self._derived_values[name]

    def subscribe(self, handler: Callable[[Event], None]) -> Callable[[], None]:
        """
        Register a change handler.

        The handler receives an event whose payload ``fields`` is the frozen
        set of changed field and view names. Returns an unsubscribe callable.
        """
        return self._events.subscribe(STORE_CHANGED, handler)

    def close(self) -> None:
        """Stop listening to session changes"""
        self._unsubscribe_session()

    def reset(self) -> None:
        """Discard all data; results still in flight will be ignored"""
        self._generation += 1
        self._edit_locks = {}
        self._commit(**self._empty_fields())
        self._log.info("store_reset", generation=self._generation)

    def _on_session_event(self, event: Event) -> None:
        if event.name in (LOGGED_OUT, LOGGED_IN, SESSION_RESTORED):
            self.reset()

    # Read access

    @property
    def current_month(self) -> str:
        return self._current_month

    @property
    def summary(self) -> Summary:
        return dict(self._summary)

    @property
    def transactions(self) -> List[Transaction]:
        """Transactions as displayed: pending categories win over confirmed ones"""
        return [item.displayed for item in self._transactions]

    @property
    def confirmed_transactions(self) -> List[Transaction]:
        return [item.confirmed for item in self._transactions]

    @property
    def pending_edits(self) -> FrozenSet[int]:
        return frozenset(item.confirmed.id for item in self._transactions if item.has_pending)

    @property
    def budgets(self) -> BudgetMap:
        return dict(self._budgets)

    @property
    def budget_draft(self) -> Optional[BudgetMap]:
        return dict(self._budget_draft) if self._budget_draft is not None else None

    @property
    def is_editing_budgets(self) -> bool:
        return self._budget_draft is not None

    @property
    def available_months(self) -> List[str]:
        return list(self._available_months)

    @property
    def notices(self) -> List[Notice]:
        return list(self._notices)

    @property
    def is_loading(self) -> bool:
        return self._in_flight > 0

    @property
    def totals(self) -> Totals:
        return self._derived_values['totals']

    @property
    def pie_series(self) -> List[PieSlice]:
        return self._derived_values['pie_series']

    @property
    def bar_series(self) -> List[BarEntry]:
        return self._derived_values['bar_series']

    @property
    def category_statuses(self) -> Dict[str, BudgetStatus]:
        return self._derived_values['category_statuses']

    @property
    def budget_usage(self) -> BudgetUsage:
        return self._derived_values['budget_usage']

    def drain_notices(self) -> List[Notice]:
        """Return pending notices and clear them"""
        notices = list(self._notices)
        if notices:
            self._commit(notices=[])
        return notices

    # Transport helpers

    async def _request(self, func: Callable[..., Result], *args: Any) -> Result:
        generation = self._generation
        self._commit(in_flight=self._in_flight + 1)
        try:
            return await asyncio.to_thread(func, *args)
        finally:
            if generation == self._generation:
                self._commit(in_flight=self._in_flight - 1)

    def _is_current(self, generation: int, month: Optional[str] = None) -> bool:
        if generation != self._generation:
            return False
        return month is None or month == self._current_month

    def _add_notice(self, level: str, operation: str, message: str) -> None:
        self._commit(notices=self._notices + [Notice(level, operation, message)])

    def _handle_failure(self, operation: str, result: Result, level: str, prefix: str) -> None:
        error = result.error
        self._log.warning("operation_failed", operation=operation, kind=error.kind,
                          status_code=error.status_code, month=self._current_month)

        if isinstance(error, AuthenticationError):
            # Logging out resets the store, so the notice goes in afterwards
            self._gate.logout()
            self._add_notice('error', operation, result.message)
            return

        message = f"{prefix}: {result.message}" if prefix else result.message
        self._add_notice(level, operation, message)

    def _read_failed(self, operation: str, result: Result) -> None:
        self._handle_failure(operation, result, 'warning', f"Could not refresh {operation.replace('fetch_', '')}")

    def _write_failed(self, operation: str, result: Result, prefix: str) -> None:
        self._handle_failure(operation, result, 'error', prefix)

    def _not_signed_in(self, operation: str) -> Result:
        self._log.info("operation_skipped", operation=operation, reason="unauthenticated")
        return Result.failure(AuthenticationError("Not signed in", 401))

    # Fetch cycles

    async def _fetch_summary(self, month: str) -> bool:
        generation = self._generation
        result = await self._request(self._source.fetch_summary, month)
        if generation != self._generation:
            return False
        if not result.ok:
            if self._is_current(generation, month):
                self._read_failed('fetch_summary', result)
            return False

        cache = dict(self._summary_cache)
        cache[month] = result.value
        if not self._is_current(generation, month):
            self._log.debug("stale_result_dropped", operation="fetch_summary", month=month,
                            current_month=self._current_month)
            self._commit(summary_cache=cache)
            return False

        self._commit(summary=result.value, summary_cache=cache)
        return True

    async def _fetch_transactions(self, month: str) -> bool:
        generation = self._generation
        result = await self._request(self._source.fetch_transactions, month)
        if not self._is_current(generation, month):
            self._log.debug("stale_result_dropped", operation="fetch_transactions", month=month,
                            current_month=self._current_month)
            return False
        if not result.ok:
            self._read_failed('fetch_transactions', result)
            return False

        pending = {
            item.confirmed.id: item.pending.category
            for item in self._transactions if item.has_pending
        }
        tracked = []
        for transaction in result.value:
            item = Tracked(confirmed=transaction)
            if transaction.id in pending:
                item = item.propose(transaction.with_category(pending[transaction.id]))
            tracked.append(item)

        self._commit(transactions=tracked)
        return True

    async def _fetch_budgets(self) -> bool:
        generation = self._generation
        result = await self._request(self._source.fetch_budgets)
        if not self._is_current(generation):
            return False
        if not result.ok:
            self._read_failed('fetch_budgets', result)
            return False

        self._commit(budgets=result.value)
        return True

    async def _fetch_available_months(self) -> bool:
        generation = self._generation
        result = await self._request(self._source.fetch_available_months)
        if not self._is_current(generation):
            return False
        if not result.ok:
            self._read_failed('fetch_available_months', result)
            return False

        months = result.value
        self._commit(available_months=months)

        if months and not self._month_explicit and not self._auto_selected:
            newest = months[0]
            self._commit(auto_selected=True)
            if newest != self._current_month:
                self._log.info("month_auto_selected", month=newest)
                await self._load_month(newest, explicit=False)
        return True

    def _switch_month(self, month: str, explicit: bool) -> None:
        changes: Dict[str, Any] = {'current_month': month}
        if explicit:
            changes['month_explicit'] = True
        if month != self._current_month:
            changes['summary'] = self._summary_cache.get(month, {})
            changes['transactions'] = []
        self._commit(**changes)

    async def _load_month(self, month: str, explicit: bool) -> None:
        self._switch_month(month, explicit)
        if not self._gate.is_authenticated:
            self._log.info("operation_skipped", operation="load_month", reason="unauthenticated")
            return
        await asyncio.gather(self._fetch_summary(month), self._fetch_transactions(month))

    async def select_month(self, month: str) -> None:
        """
        Select a month and refetch its summary and transactions.

        A month missing from ``available_months`` is still honored; an empty
        result is not an error. An explicit selection disables the automatic
        selection of the newest month.

        Raises:
            ValueError: If ``month`` is not a YYYY-MM key
        """
        month = MonthFormatter.validate_month(month)
        self._log.info("month_selected", month=month)
        await self._load_month(month, explicit=True)

    async def refresh_all(self) -> None:
        """
        Fetch summary, transactions, budgets and available months concurrently.

        The first time available months arrive in a session, the newest one is
        selected unless the user already chose a month.
        """
        if not self._gate.is_authenticated:
            self._log.info("operation_skipped", operation="refresh_all", reason="unauthenticated")
            return

        month = self._current_month
        await asyncio.gather(
            self._fetch_summary(month),
            self._fetch_transactions(month),
            self._fetch_budgets(),
            self._fetch_available_months()
        )

    async def refresh_summary(self) -> bool:
        """Refetch the summary of the current month"""
        if not self._gate.is_authenticated:
            return False
        return await self._fetch_summary(self._current_month)

    # Transaction edits

    def _find_transaction(self, transaction_id: int) -> Optional[int]:
        for index, item in enumerate(self._transactions):
            if item.confirmed.id == transaction_id:
                return index
        return None

    def _update_tracked(self, transaction_id: int, update: Callable[[Tracked], Tracked]) -> None:
        index = self._find_transaction(transaction_id)
        if index is None:
            return
        tracked = list(self._transactions)
        tracked[index] = update(tracked[index])
        self._commit(transactions=tracked)

    def _hold_edit_lock(self, transaction_id: int) -> asyncio.Lock:
        """Lock serializing edits of one transaction, counted per user"""
        lock, users = self._edit_locks.get(transaction_id, (None, 0))
        if lock is None:
            lock = asyncio.Lock()
        self._edit_locks[transaction_id] = (lock, users + 1)
        return lock

    def _drop_edit_lock(self, transaction_id: int, lock: asyncio.Lock) -> None:
        entry = self._edit_locks.get(transaction_id)
        if entry is None or entry[0] is not lock:
            return
        if entry[1] <= 1:
            del self._edit_locks[transaction_id]
        else:
            self._edit_locks[transaction_id] = (lock, entry[1] - 1)

    async def edit_transaction_category(self, transaction_id: int, category: str) -> Result[None]:
        """
        Move a transaction to another category.

        The new category shows immediately. On success the current month's
        summary is refetched; on failure the transaction goes back to its
        confirmed category and an error notice is added. A second edit of the
        same transaction waits for the first to resolve.

        Args:
            transaction_id: Transaction ID
            category: New category

        Returns:
            Result[None]: The server's verdict

        Raises:
            ValueError: If ``category`` is not a known category
        """
        if not is_known_category(category):
            raise ValueError(f"Unknown category: {category}")
        if not self._gate.is_authenticated:
            return self._not_signed_in('edit_transaction_category')

        lock = self._hold_edit_lock(transaction_id)
        try:
            async with lock:
                generation = self._generation
                self._update_tracked(
                    transaction_id,
                    lambda item: item.propose(item.displayed.with_category(category))
                )
                self._log.info("category_edit_started", transaction_id=transaction_id, category=category)

                result = await self._request(self._source.update_transaction_category, transaction_id, category)
                if generation != self._generation:
                    return result

                if result.ok:
                    self._update_tracked(transaction_id, lambda item: item.confirm())
                    self._log.info("category_edit_confirmed", transaction_id=transaction_id)
                    await self._fetch_summary(self._current_month)
                else:
                    self._update_tracked(transaction_id, lambda item: item.rollback())
                    self._write_failed('edit_transaction_category', result, "Failed to update category")
                return result
        finally:
            self._drop_edit_lock(transaction_id, lock)

    # Budget edits

    def begin_budget_edit(self) -> BudgetMap:
        """Start a draft from the confirmed budgets; every known category is present"""
        draft = normalize_budget_map(self._budgets)
        self._commit(budget_draft=draft)
        return dict(draft)

    def update_budget_draft(self, category: str, amount: Any) -> None:
        """
        Change one entry of the draft, starting a draft if needed.

        Raises:
            ValueError: If the amount is not a number or is negative
        """
        limit = to_decimal(amount)
        if limit < 0:
            raise ValueError(f"Budget for {category} cannot be negative: {limit}")
        draft = dict(self._budget_draft) if self._budget_draft is not None else normalize_budget_map(self._budgets)
        draft[category] = limit
        self._commit(budget_draft=draft)

    def cancel_budget_edit(self) -> None:
        self._commit(budget_draft=None)

    async def commit_budget_edit(self, draft_map: Optional[Dict[str, Any]] = None) -> Result[None]:
        """
        Save the draft budgets.

        On success the draft becomes the confirmed budget map and the current
        month's summary is refetched once. On failure the draft is kept so
        nothing the user typed is lost.

        Args:
            draft_map: Budgets to save; defaults to the current draft

        Returns:
            Result[None]: The server's verdict

        Raises:
            ValueError: If an amount is not a number or is negative
        """
        source = draft_map if draft_map is not None else (self._budget_draft or self._budgets)
        draft = normalize_budget_map(source)
        self._commit(budget_draft=draft)

        if not self._gate.is_authenticated:
            return self._not_signed_in('commit_budget_edit')

        generation = self._generation
        result = await self._request(self._source.save_budgets, dict(draft))
        if generation != self._generation:
            return result

        if result.ok:
            # Keep a draft that was changed again while the save was in flight
            remaining_draft = None if self._budget_draft == draft else self._budget_draft
            self._commit(budgets=draft, budget_draft=remaining_draft)
            self._log.info("budgets_saved", categories=len(draft))
            await self._fetch_summary(self._current_month)
        else:
            self._write_failed('commit_budget_edit', result, "Failed to update budgets")
        return result

    # Statement import

    async def upload_statement(self, file: BinaryIO, account_format: AccountFormat) -> Result[UploadResult]:
        """
        Import a bank statement.

        On success the summary, transactions and available months are
        refetched and an info notice reports the import counts.
        """
        account_format = AccountFormat(account_format)
        if not self._gate.is_authenticated:
            return self._not_signed_in('upload_statement')

        generation = self._generation
        result = await self._request(self._source.upload_statement, file, account_format)
        if generation != self._generation:
            return result

        if result.ok:
            self._add_notice('info', 'upload_statement', f"Success! {result.value.describe()}")
            month = self._current_month
            await asyncio.gather(
                self._fetch_summary(month),
                self._fetch_transactions(month),
                self._fetch_available_months()
            )
        else:
            self._write_failed('upload_statement', result, "Upload failed")
        return result
