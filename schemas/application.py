from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field


class ApplicationSubmit(BaseModel):
    # Blank values are accepted here and rejected by the intake workflow,
    # which audits the rejection before raising.
    applicant_name: str = Field(..., alias="applicantName")
    applicant_phone: str = Field(..., alias="applicantPhone")
    applicant_email: str = Field(..., alias="applicantEmail")
    card_number: str = Field(..., alias="cardNumber")
    card_expiry: str = Field(..., alias="cardExpiry")
    amount_paid: Decimal = Field(..., alias="amountPaid")

    model_config = {"populate_by_name": True}


class IntakeResult(BaseModel):
    status: Literal["completed", "rejected"]
    application_id: Optional[str] = None
    reason: Optional[str] = None

    @property
    def completed(self) -> bool:
        return self.status == "completed"


class ApplicationResponse(BaseModel):
    id: str
    applicant_name: str
    applicant_phone: str
    applicant_email: str
    card_number: str
    card_expiry_date: str
    amount_paid: Decimal
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @classmethod
    def from_orm_masked(cls, obj) -> "ApplicationResponse":
        """Only the last four card digits leave the service."""
        number = obj.card_number or ""
        masked = "*" * max(len(number) - 4, 0) + number[-4:]
        return cls(
            id=obj.id,
            applicant_name=obj.applicant_name,
            applicant_phone=obj.applicant_phone,
            applicant_email=obj.applicant_email,
            card_number=masked,
            card_expiry_date=obj.card_expiry_date,
            amount_paid=obj.amount_paid,
            created_at=obj.created_at,
        )
