import io
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
import requests

from budget_dashboard.api import RemoteDataSource
from budget_dashboard.api.errors import (
    AuthenticationError,
    HttpStatusError,
    MalformedResponseError,
    NetworkError,
)
from budget_dashboard.models import AccountFormat

from helpers import make_response

BASE_URL = "http://budget.test/api"


@pytest.fixture
def http_session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(gate, http_session):
    http_session.headers = {}
    return RemoteDataSource(gate, base_url=BASE_URL, timeout=5, http_session=http_session)


def last_call(http_session):
    return http_session.request.call_args.kwargs


def test_fetch_summary(client, http_session, gate):
    gate.login("secret")
    http_session.request.return_value = make_response(200, {
        "Groceries": {"spent": 250.5, "budget": 300, "remaining": 999,
                      "percentage_used": 1, "transactions_count": 4, "over_budget": True},
    })

    result = client.fetch_summary("2024-03")

    assert result.ok
    groceries = result.value["Groceries"]
    assert groceries.spent == Decimal("250.5")
    assert groceries.remaining == Decimal("49.5")
    assert groceries.over_budget is False
    assert groceries.transaction_count == 4

    call = last_call(http_session)
    assert call["method"] == "GET"
    assert call["url"] == f"{BASE_URL}/summary"
    assert call["params"] == {"month": "2024-03"}
    assert call["headers"]["Authorization"] == "Bearer secret"
    assert call["timeout"] == 5


def test_requests_carry_no_credential_when_signed_out(client, http_session):
    http_session.request.return_value = make_response(200, [])
    client.fetch_transactions("2024-03")
    assert "Authorization" not in last_call(http_session)["headers"]


def test_fetch_transactions_parses_wire_keys(client, http_session):
    http_session.request.return_value = make_response(200, [{
        "ID": 7,
        "Date": "2024-03-05",
        "Transaction Name": "Corner Store",
        "Category": "Shopping",
        "Amount": "$1,204.10",
        "Account Type": "TD",
    }])

    result = client.fetch_transactions("2024-03")

    assert result.ok
    [tx] = result.value
    assert tx.id == 7
    assert tx.description == "Corner Store"
    assert tx.amount == Decimal("1204.10")
    assert tx.account_type == "TD"


def test_fetch_available_months_sorted_newest_first(client, http_session):
    http_session.request.return_value = make_response(200, ["2023-12", "2024-02", "2024-01"])
    result = client.fetch_available_months()
    assert result.value == ["2024-02", "2024-01", "2023-12"]


def test_fetch_budgets_fills_missing_categories(client, http_session):
    http_session.request.return_value = make_response(200, {"Groceries": 300})
    result = client.fetch_budgets()
    assert result.value["Groceries"] == Decimal("300")
    assert result.value["Travel"] == Decimal("0")


@pytest.mark.parametrize("body", [
    '{"Groceries": NaN}',
    '{"Groceries": "Infinity"}',
])
def test_non_finite_budget_is_malformed(client, http_session, body):
    http_session.request.return_value = make_response(200, text=body)
    result = client.fetch_budgets()
    assert isinstance(result.error, MalformedResponseError)


def test_non_finite_summary_amount_is_malformed(client, http_session):
    http_session.request.return_value = make_response(200, text='{"Groceries": {"spent": NaN, "budget": 100}}')
    result = client.fetch_summary("2024-03")
    assert isinstance(result.error, MalformedResponseError)


def test_network_failure(client, http_session):
    http_session.request.side_effect = requests.ConnectionError("refused")
    result = client.fetch_summary("2024-03")
    assert not result.ok
    assert isinstance(result.error, NetworkError)
    assert result.message == NetworkError.generic_message


def test_timeout_is_network_failure(client, http_session):
    http_session.request.side_effect = requests.Timeout("slow")
    result = client.fetch_budgets()
    assert isinstance(result.error, NetworkError)


def test_server_error_message_is_surfaced(client, http_session):
    http_session.request.return_value = make_response(500, {"error": "Database unavailable"})
    result = client.fetch_summary("2024-03")
    assert isinstance(result.error, HttpStatusError)
    assert result.error.status_code == 500
    assert result.message == "Database unavailable"


def test_server_error_without_detail(client, http_session):
    http_session.request.return_value = make_response(502, text="<html>Bad gateway</html>")
    result = client.fetch_summary("2024-03")
    assert result.error.message == "HTTP error! Status: 502"
    assert result.message == HttpStatusError.generic_message


@pytest.mark.parametrize("status", [401, 403])
def test_authorization_failures(client, http_session, status):
    http_session.request.return_value = make_response(status, {"error": "Token expired"})
    result = client.fetch_transactions("2024-03")
    assert isinstance(result.error, AuthenticationError)


def test_invalid_json_is_malformed(client, http_session):
    http_session.request.return_value = make_response(200, text="{oops")
    result = client.fetch_summary("2024-03")
    assert isinstance(result.error, MalformedResponseError)


def test_wrong_shape_is_malformed(client, http_session):
    http_session.request.return_value = make_response(200, {"unexpected": "object"})
    result = client.fetch_transactions("2024-03")
    assert isinstance(result.error, MalformedResponseError)


def test_update_category(client, http_session):
    http_session.request.return_value = make_response(200, {"success": True})

    result = client.update_transaction_category(7, "Dining & Restaurants")

    assert result.ok
    call = last_call(http_session)
    assert call["method"] == "PUT"
    assert call["url"] == f"{BASE_URL}/transactions/7/category"
    assert call["json"] == {"category": "Dining & Restaurants"}


def test_update_category_refused_by_service(client, http_session):
    http_session.request.return_value = make_response(200, {"success": False, "error": "Invalid category"})
    result = client.update_transaction_category(7, "Travel")
    assert isinstance(result.error, HttpStatusError)
    assert result.message == "Invalid category"


def test_mutation_reply_without_success_flag(client, http_session):
    http_session.request.return_value = make_response(200, {"ok": 1})
    result = client.update_transaction_category(7, "Travel")
    assert isinstance(result.error, MalformedResponseError)


def test_save_budgets_sends_numbers(client, http_session):
    http_session.request.return_value = make_response(200, {"success": True})

    result = client.save_budgets({"Groceries": Decimal("300.50"), "Travel": Decimal("0")})

    assert result.ok
    call = last_call(http_session)
    assert call["url"] == f"{BASE_URL}/budgets"
    assert call["json"] == {"Groceries": 300.5, "Travel": 0.0}


def test_upload_statement(client, http_session, gate):
    gate.login("secret")
    http_session.request.return_value = make_response(
        200, {"success": True, "total_transactions": 12, "new_transactions": 4}
    )

    result = client.upload_statement(io.BytesIO(b"date,amount\n"), AccountFormat.AMEX)

    assert result.ok
    assert result.value.describe() == "Processed 12 transactions, added 4 new ones."
    call = last_call(http_session)
    assert call["method"] == "POST"
    assert call["url"] == f"{BASE_URL}/upload-csv"
    assert call["data"] == {"account_type": "AMEX"}
    assert call["files"]["file"][0] == "statement.csv"
    assert "Content-Type" not in call["headers"]
    assert call["headers"]["Authorization"] == "Bearer secret"
