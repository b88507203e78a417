"""
Transaction data models for the budget dashboard.

This module contains the Pydantic model for transactions as the budget
service reports them.
"""

from decimal import Decimal
from typing import Annotated, Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..utils.money import to_decimal


class Transaction(BaseModel):
    """Model for an imported transaction"""
    id: Annotated[int, Field(description="Server-assigned transaction ID")]
    date: Annotated[str, Field(description="Transaction date as reported by the bank")]
    description: Annotated[str, Field(default="", description="Transaction name")]
    category: Annotated[str, Field(description="Category name")]
    amount: Annotated[Decimal, Field(description="Transaction amount")]
    account_type: Annotated[str, Field(default="", description="Account the transaction came from")]

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    @field_validator('amount', mode='before')
    @classmethod
    def validate_amount(cls, value: Any) -> Decimal:
        """Amounts arrive either as numbers or as strings"""
        return to_decimal(value)

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'Transaction':
        """Create instance from budget service response"""
        return cls(
            id=data['ID'],
            date=data['Date'],
            description=data.get('Transaction Name') or "",
            category=data['Category'],
            amount=data.get('Amount'),
            account_type=data.get('Account Type') or ""
        )

    def with_category(self, category: str) -> 'Transaction':
        """Return a copy of this transaction in another category"""
        return self.model_copy(update={'category': category})


def transactions_from_api_response(data: Any) -> List[Transaction]:
    """
    Build the transaction list from the ``GET /transactions`` payload.

    Raises:
        TypeError: If the payload is not a list
    """
    if not isinstance(data, list):
        raise TypeError(f"Expected a list of transactions, got {type(data).__name__}")
    return [Transaction.from_api_response(item) for item in data]
