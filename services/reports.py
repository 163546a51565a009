"""
Plain-text reports written through the archiver.
Blank report parameters are logged and skipped rather than raised.
"""
from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models import TenantApplication
from services.collaborators import Analytics, Archiver

logger = logging.getLogger(__name__)

TENANT_REPORT_FILE = "tenant_report.txt"
PAYMENT_SUMMARY_FILE = "payment_summary_report.txt"


def generate_tenant_report(
    archiver: Archiver,
    analytics: Analytics,
    property_id: str,
    tenant_email: str,
) -> Optional[str]:
    if not (property_id or "").strip() or not (tenant_email or "").strip():
        logger.warning("Invalid tenant report request.")
        return None

    content = f"Tenant report for property {property_id} and tenant {tenant_email}"
    archiver.save_file(TENANT_REPORT_FILE, content.encode("utf-8"))
    analytics.track_event(
        "TenantReportGenerated",
        {"PropertyId": property_id, "TenantEmail": tenant_email},
    )
    return content


async def generate_payment_summary(
    session: AsyncSession,
    archiver: Archiver,
    from_date: str,
    to_date: str,
) -> Optional[str]:
    """
    Count and total the advance payments of applications created within
    [from_date, to_date] (ISO dates, inclusive, UTC days). Raises ValueError for malformed dates.
    """
    if not (from_date or "").strip() or not (to_date or "").strip():
        logger.warning("Invalid date range for payment summary report.")
        return None

    start = datetime.combine(date.fromisoformat(from_date.strip()), time.min, tzinfo=timezone.utc)
    end = datetime.combine(
        date.fromisoformat(to_date.strip()) + timedelta(days=1), time.min, tzinfo=timezone.utc
    )
    if end <= start:
        raise ValueError("from_date must not be after to_date")

    result = await session.execute(
        select(func.count(TenantApplication.id), func.sum(TenantApplication.amount_paid)).where(
            TenantApplication.created_at >= start,
            TenantApplication.created_at < end,
        )
    )
    count, total = result.one()
    total = Decimal(str(total)) if total is not None else Decimal("0")

    content = (
        f"Payment summary report from {from_date} to {to_date}\n"
        f"Applications: {count}\n"
        f"Total paid: {total}"
    )
    archiver.save_file(PAYMENT_SUMMARY_FILE, content.encode("utf-8"))
    return content
