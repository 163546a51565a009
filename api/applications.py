from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models import TenantApplication
from schemas.application import ApplicationResponse, ApplicationSubmit
from services.collaborators import ApplicationStore
from services.intake import ApplicationValidationError, DuplicateApplication, build_intake_workflow

router = APIRouter(prefix="/api/applications", tags=["applications"])

MSG_APPLICATION_NOT_FOUND = "Application not found"


def _app_to_response(app: TenantApplication) -> dict[str, Any]:
    """Serialize application to dict with camelCase for frontend; card number masked."""
    masked = ApplicationResponse.from_orm_masked(app)
    return {
        "id": masked.id,
        "applicantName": masked.applicant_name,
        "applicantPhone": masked.applicant_phone,
        "applicantEmail": masked.applicant_email,
        "cardNumber": masked.card_number,
        "cardExpiryDate": masked.card_expiry_date,
        "amountPaid": str(masked.amount_paid),
        "createdAt": masked.created_at.isoformat() if masked.created_at else None,
    }


@router.get("")
async def list_applications(db: AsyncSession = Depends(get_db)):
    apps = await ApplicationStore(db).list_all()
    return [_app_to_response(a) for a in apps]


@router.get("/{application_id}")
async def get_application(application_id: str, db: AsyncSession = Depends(get_db)):
    app = await ApplicationStore(db).get(application_id)
    if not app:
        raise HTTPException(status_code=404, detail=MSG_APPLICATION_NOT_FOUND)
    return _app_to_response(app)


@router.post("", status_code=201)
async def submit_application(body: ApplicationSubmit, db: AsyncSession = Depends(get_db)):
    workflow = build_intake_workflow(db)
    try:
        result = await workflow.submit(
            body.applicant_name,
            body.applicant_phone,
            body.applicant_email,
            body.card_number,
            body.card_expiry,
            body.amount_paid,
        )
    except ApplicationValidationError as e:
        # Keep the audit entry written for the rejection
        await db.commit()
        raise HTTPException(status_code=400, detail=str(e))
    except DuplicateApplication as e:
        await db.commit()
        raise HTTPException(status_code=409, detail=str(e))

    if not result.completed:
        await db.commit()
        raise HTTPException(status_code=402, detail=result.reason or "Payment failed.")
    return {"id": result.application_id, "status": result.status}
