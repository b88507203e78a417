"""
Test doubles and builders shared by the test modules.
"""

import asyncio
import json
import threading
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Tuple

import requests

from budget_dashboard.api.errors import APIError
from budget_dashboard.api.result import Result
from budget_dashboard.models.budget import normalize_budget_map
from budget_dashboard.models.category import CategorySummary
from budget_dashboard.models.transaction import Transaction
from budget_dashboard.models.upload import UploadResult


def summary_of(entries: Dict[str, Tuple[Any, Any]]) -> Dict[str, CategorySummary]:
    """Build a Summary from ``{category: (spent, budget)}``"""
    return {
        category: CategorySummary(spent=spent, budget=budget, transaction_count=1)
        for category, (spent, budget) in entries.items()
    }


def transaction(tx_id: int, category: str, amount: str = "10.00", date: str = "2024-03-05") -> Transaction:
    return Transaction(
        id=tx_id,
        date=date,
        description=f"Purchase {tx_id}",
        category=category,
        amount=Decimal(amount),
        account_type="TD"
    )


def make_response(status_code: int, body: Any = None, text: Optional[str] = None) -> requests.Response:
    """Build a real ``requests.Response`` carrying a JSON (or raw text) body"""
    response = requests.Response()
    response.status_code = status_code
    response.encoding = 'utf-8'
    if text is not None:
        response._content = text.encode('utf-8')
    elif body is not None:
        response._content = json.dumps(body).encode('utf-8')
        response.headers['Content-Type'] = 'application/json'
    else:
        response._content = b''
    return response


async def wait_for(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Yield to the event loop until ``predicate`` holds"""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.01)


class FakeDataSource:
    """
    In-memory stand-in for RemoteDataSource.

    Calls are recorded in ``calls`` as ``(name, *args)`` tuples. A call can be
    held open by registering a ``threading.Event`` in ``gates`` under the same
    tuple, and made to fail by registering an error in ``failures`` under the
    tuple or under the bare operation name.
    """

    def __init__(self):
        self.summaries: Dict[str, Dict[str, CategorySummary]] = {}
        self.transactions: Dict[str, List[Transaction]] = {}
        self.budgets: Dict[str, Decimal] = normalize_budget_map({})
        self.months: List[str] = []
        self.upload_result = UploadResult(total_transactions=5, new_transactions=3)
        self.calls: List[tuple] = []
        self.gates: Dict[tuple, threading.Event] = {}
        self.failures: Dict[Any, APIError] = {}
        self._lock = threading.Lock()

    def count(self, name: str) -> int:
        with self._lock:
            return sum(1 for call in self.calls if call[0] == name)

    def called(self, *call: Any) -> bool:
        with self._lock:
            return tuple(call) in self.calls

    def _enter(self, name: str, *args: Any) -> Optional[Result]:
        key = (name,) + args
        with self._lock:
            self.calls.append(key)
        gate = self.gates.get(key)
        if gate is not None:
            gate.wait(timeout=5)
        error = self.failures.get(key) or self.failures.get(name)
        if error is not None:
            return Result.failure(error)
        return None

    def fetch_summary(self, month):
        return self._enter('fetch_summary', month) or Result.success(dict(self.summaries.get(month, {})))

    def fetch_transactions(self, month):
        return self._enter('fetch_transactions', month) or Result.success(list(self.transactions.get(month, [])))

    def fetch_budgets(self):
        return self._enter('fetch_budgets') or Result.success(dict(self.budgets))

    def fetch_available_months(self):
        return self._enter('fetch_available_months') or Result.success(list(self.months))

    def upload_statement(self, file, account_format):
        return self._enter('upload_statement', account_format.value) or Result.success(self.upload_result)

    def update_transaction_category(self, transaction_id, category):
        failed = self._enter('update_transaction_category', transaction_id, category)
        if failed:
            return failed
        for month, items in self.transactions.items():
            self.transactions[month] = [
                t.with_category(category) if t.id == transaction_id else t for t in items
            ]
        return Result.success(None)

    def save_budgets(self, budgets):
        failed = self._enter('save_budgets')
        if failed:
            return failed
        self.budgets = dict(budgets)
        return Result.success(None)
