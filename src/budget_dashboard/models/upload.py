"""
Statement upload models.
"""

from enum import Enum
from typing import Annotated, Any, Dict

from pydantic import BaseModel, Field


class AccountFormat(str, Enum):
    """Bank statement formats the service can parse"""
    TD = "TD"
    AMEX = "AMEX"


class UploadResult(BaseModel):
    """Outcome of a statement import"""
    total_transactions: Annotated[int, Field(ge=0, description="Rows found in the statement")]
    new_transactions: Annotated[int, Field(ge=0, description="Rows that were not already imported")]

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'UploadResult':
        """Create instance from budget service response"""
        return cls(
            total_transactions=data['total_transactions'],
            new_transactions=data['new_transactions']
        )

    def describe(self) -> str:
        return (f"Processed {self.total_transactions} transactions, "
                f"added {self.new_transactions} new ones.")
