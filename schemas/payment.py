from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

Gateway = Literal["DomesticGateway", "USDGateway", "InternationalGateway"]


class PaymentRequest(BaseModel):
    card_number: str = Field(..., alias="cardNumber")
    card_expiry: str = Field(..., alias="cardExpiry")
    security_code: str = Field("", alias="securityCode")
    amount: Decimal
    currency: str = "GBP"
    international: bool = False

    model_config = {"populate_by_name": True}


class PaymentOutcome(BaseModel):
    """Result of one settlement; never persisted."""
    transaction_id: str
    final_amount: Decimal
    gateway: Gateway
    discount: Decimal = Decimal("0")
