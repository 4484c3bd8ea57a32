"""Expense request models."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class ExpenseCreate(BaseModel):
    """Expense creation request model."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., description="Free-text label")
    amount: float = Field(..., description="Expense amount")
    date: str = Field(..., description="Expense date (ISO-8601)")
    category: str = Field(..., description="Free-text category")
    payment_source: Optional[str] = Field(None, alias="paymentSource", description="Card, cash, ...")


class ExpenseUpdate(BaseModel):
    """Expense update request model."""

    model_config = ConfigDict(populate_by_name=True, extra='forbid')

    title: Optional[str] = Field(None, description="Free-text label")
    amount: Optional[float] = Field(None, description="Expense amount")
    date: Optional[str] = Field(None, description="Expense date (ISO-8601)")
    category: Optional[str] = Field(None, description="Free-text category")
    payment_source: Optional[str] = Field(None, alias="paymentSource", description="Card, cash, ...")
