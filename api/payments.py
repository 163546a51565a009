from fastapi import APIRouter, HTTPException

from schemas.payment import PaymentRequest
from services.settlement import PaymentError, settle

router = APIRouter(prefix="/api/payments", tags=["payments"])


@router.post("/settle", response_model=dict)
async def settle_payment(body: PaymentRequest):
    try:
        outcome = settle(
            body.card_number,
            body.card_expiry,
            body.security_code,
            body.amount,
            currency=body.currency,
            international=body.international,
        )
    except PaymentError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "transactionId": outcome.transaction_id,
        "finalAmount": str(outcome.final_amount),
        "gateway": outcome.gateway,
        "discount": str(outcome.discount),
    }
