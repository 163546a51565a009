from __future__ import annotations

import logging

from models import Property
from schemas.property import PropertyCreate
from services.collaborators import Analytics, Archiver, AuditLog, Notifier, PropertyStore

logger = logging.getLogger(__name__)


async def onboard_property(
    store: PropertyStore,
    notifier: Notifier,
    audit: AuditLog,
    analytics: Analytics,
    archiver: Archiver,
    data: PropertyCreate,
) -> Property:
    """
    Persist a new listing, tell the landlord, and archive a snapshot.
    There is no decision logic here; store faults propagate before anything is sent.
    """
    prop = await store.insert(
        Property(
            address=data.address,
            city=data.city,
            postcode=data.postcode,
            landlord_name=data.landlord_name,
            landlord_email=data.landlord_email,
            monthly_rent=data.monthly_rent,
            bedrooms=data.bedrooms,
        )
    )
    audit.log(f"New property added: {prop.address}")

    if prop.landlord_email and prop.landlord_email.strip():
        try:
            notifier.send_email(
                prop.landlord_email,
                "Property Added",
                f"Your property at {prop.address} has been successfully added to the system.",
            )
        except Exception:
            logger.exception("Landlord notification failed for property %s", prop.id)

    analytics.track_event(
        "PropertyAddedDetailed",
        {
            "City": prop.city,
            "Postcode": prop.postcode,
            "Landlord": prop.landlord_name,
            "Rent": str(prop.monthly_rent),
        },
    )

    content = (
        f"Property: {prop.address}\n"
        f"City: {prop.city}\n"
        f"Rent: {prop.monthly_rent}\n"
        f"Landlord: {prop.landlord_name}"
    )
    archiver.save_file(f"property_{prop.id}_archive.txt", content.encode("utf-8"))
    audit.log(f"Archived property data for ID: {prop.id}")
    return prop
