import pytest

from budget_dashboard.services.aggregation_store import AggregationStore
from budget_dashboard.session import SessionGate, TokenStorage

from helpers import FakeDataSource, summary_of, transaction


@pytest.fixture
def token_storage(tmp_path):
    return TokenStorage(tmp_path / "session.json")


@pytest.fixture
def gate(token_storage):
    return SessionGate(token_storage)


@pytest.fixture
def source():
    fake = FakeDataSource()
    fake.months = ["2024-03", "2024-02"]
    fake.summaries = {
        "2024-02": summary_of({"Groceries": ("120.00", "300"), "Shopping": ("80.00", "100")}),
        "2024-03": summary_of({"Groceries": ("250.50", "300"), "Dining & Restaurants": ("95.25", "100")}),
    }
    fake.transactions = {
        "2024-02": [transaction(3, "Groceries", date="2024-02-11")],
        "2024-03": [transaction(7, "Shopping"), transaction(8, "Groceries")],
    }
    return fake


@pytest.fixture
def store(source, gate):
    gate.login("token-a")
    store = AggregationStore(source, gate, initial_month="2024-03")
    yield store
    store.close()
