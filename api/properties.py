from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from database import get_db
from models import Property
from schemas.property import PropertyCreate
from services.collaborators import (
    DatabaseAuditLog,
    FileArchiver,
    LoggingAnalytics,
    LoggingNotifier,
    PropertyStore,
)
from services.properties import onboard_property

router = APIRouter(prefix="/api/properties", tags=["properties"])


def _property_to_response(p: Property) -> dict[str, Any]:
    return {
        "id": p.id,
        "address": p.address,
        "city": p.city,
        "postcode": p.postcode,
        "landlordName": p.landlord_name,
        "landlordEmail": p.landlord_email,
        "monthlyRent": str(p.monthly_rent),
        "bedrooms": p.bedrooms,
        "createdAt": p.created_at.isoformat() if p.created_at else None,
    }


@router.post("", status_code=201)
async def create_property(body: PropertyCreate, db: AsyncSession = Depends(get_db)):
    prop = await onboard_property(
        store=PropertyStore(db),
        notifier=LoggingNotifier(),
        audit=DatabaseAuditLog(db),
        analytics=LoggingAnalytics(),
        archiver=FileArchiver(settings.archive_dir),
        data=body,
    )
    return _property_to_response(prop)


@router.get("/{property_id}")
async def get_property(property_id: str, db: AsyncSession = Depends(get_db)):
    prop = await PropertyStore(db).get(property_id)
    if not prop:
        raise HTTPException(status_code=404, detail="Property not found")
    return _property_to_response(prop)
