from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from database import get_db
from services.collaborators import FileArchiver, LoggingAnalytics
from services.reports import generate_payment_summary, generate_tenant_report

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("/tenant", response_model=dict)
async def tenant_report(
    property_id: str = Query("", alias="propertyId"),
    tenant_email: str = Query("", alias="tenantEmail"),
):
    content = generate_tenant_report(
        FileArchiver(settings.archive_dir), LoggingAnalytics(), property_id, tenant_email
    )
    if content is None:
        raise HTTPException(status_code=400, detail="Invalid tenant report request.")
    return {"report": content}


@router.get("/payment-summary", response_model=dict)
async def payment_summary(
    from_date: str = Query("", alias="fromDate"),
    to_date: str = Query("", alias="toDate"),
    db: AsyncSession = Depends(get_db),
):
    try:
        content = await generate_payment_summary(db, FileArchiver(settings.archive_dir), from_date, to_date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if content is None:
        raise HTTPException(status_code=400, detail="Invalid date range for payment summary report.")
    return {"report": content}
