from schemas.application import ApplicationResponse, ApplicationSubmit, IntakeResult
from schemas.payment import Gateway, PaymentOutcome, PaymentRequest
from schemas.property import PropertyCreate

__all__ = [
    "ApplicationResponse",
    "ApplicationSubmit",
    "Gateway",
    "IntakeResult",
    "PaymentOutcome",
    "PaymentRequest",
    "PropertyCreate",
]
