from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class PropertyCreate(BaseModel):
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    postcode: str = Field(..., min_length=1)
    landlord_name: str = Field(..., min_length=1, alias="landlordName")
    landlord_email: Optional[str] = Field(None, alias="landlordEmail")
    monthly_rent: Decimal = Field(..., gt=0, alias="monthlyRent")
    bedrooms: int = Field(1, ge=0)

    model_config = {"populate_by_name": True}
