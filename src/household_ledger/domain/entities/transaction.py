from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

TransactionType = Literal["INCOME", "EXPENSE"]


class TransactionCreateRequest(BaseModel):
    type: TransactionType
    amount: float = Field(gt=0)
    categoryId: str
    subcategoryId: str | None = None
    paymentMethodId: str | None = None
    transactionDate: datetime
    description: str | None = None
    vendor: str | None = None
    isRecurring: bool = False
    recurringPattern: str | None = None

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v):
        if isinstance(v, str):
            return v.upper()
        return v


class TransactionListQuery(BaseModel):
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    type: Optional[TransactionType] = None
    category_id: Optional[str] = None
    page: int = 1
    limit: int = 20


class TransactionUpdateRequest(BaseModel):
    """Partial update; only fields sent by the client are applied."""

    type: Optional[TransactionType] = None
    amount: Optional[float] = Field(default=None, gt=0)
    categoryId: Optional[str] = None
    subcategoryId: Optional[str] = None
    paymentMethodId: Optional[str] = None
    transactionDate: Optional[datetime] = None
    description: Optional[str] = None
    vendor: Optional[str] = None
    isRecurring: Optional[bool] = None
    recurringPattern: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v):
        if isinstance(v, str):
            return v.upper()
        return v
