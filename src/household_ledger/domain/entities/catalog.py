from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

CategoryType = Literal["INCOME", "EXPENSE"]
VendorType = Literal["GENERAL", "STORE", "RESTAURANT", "UTILITY", "MEDICAL", "ENTERTAINMENT", "OTHER"]


class Member(BaseModel):
    """Household member as exposed to the member selector."""

    id: str
    name: str | None = None
    email: str | None = None
