"""
Ports the intake and onboarding flows talk to, with the default adapters wired by the API.
Delivery channels (email, SMS, analytics) log through `logging`; stores sit on an AsyncSession.
"""
from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Optional, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models import AuditEntry, Property, TenantApplication

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def send_email(self, recipient: str, title: str, body: str) -> None: ...

    def send_sms(self, recipient: str, body: str) -> None: ...


class AuditLog(Protocol):
    def log(self, message: str) -> None: ...


class Analytics(Protocol):
    def track_event(self, name: str, attributes: dict[str, str]) -> None: ...


class Archiver(Protocol):
    def save_file(self, name: str, data: bytes) -> None: ...


class LoggingNotifier:
    def send_email(self, recipient: str, title: str, body: str) -> None:
        logger.info("email to=%s title=%r (%d chars)", recipient, title, len(body))

    def send_sms(self, recipient: str, body: str) -> None:
        logger.info("sms to=%s (%d chars)", recipient, len(body))


class LoggingAuditLog:
    def log(self, message: str) -> None:
        logger.info("audit: %s", message)


class DatabaseAuditLog:
    """Append-only audit trail stored alongside the records it describes."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def log(self, message: str) -> None:
        # Rows are written with the caller's next flush/commit
        try:
            self._session.add(AuditEntry(message=message))
        except Exception:
            logger.exception("Could not queue audit entry: %s", message)


class LoggingAnalytics:
    def track_event(self, name: str, attributes: dict[str, str]) -> None:
        logger.info("analytics event=%s attributes=%s", name, attributes)


class FileArchiver:
    def __init__(self, root: str | Path):
        self._root = Path(root)

    def save_file(self, name: str, data: bytes) -> None:
        self._root.mkdir(parents=True, exist_ok=True)
        # Names are generated internally; strip any directory part regardless
        path = self._root / Path(name).name
        path.write_bytes(data)
        logger.debug("archived %s (%d bytes)", path, len(data))


class ApplicationStore:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def find_by_email(self, email: str) -> Optional[TenantApplication]:
        result = await self._session.execute(
            select(TenantApplication).where(TenantApplication.applicant_email == email).limit(1)
        )
        return result.scalar_one_or_none()

    async def insert(self, application: TenantApplication) -> TenantApplication:
        """Assign an id and commit, so the record survives later notification faults."""
        application.id = f"app-{uuid.uuid4().hex[:12]}"
        self._session.add(application)
        await self._session.commit()
        return application

    async def get(self, application_id: str) -> Optional[TenantApplication]:
        result = await self._session.execute(
            select(TenantApplication).where(TenantApplication.id == application_id)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[TenantApplication]:
        result = await self._session.execute(
            select(TenantApplication).order_by(TenantApplication.created_at.desc())
        )
        return list(result.scalars().all())


class PropertyStore:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def insert(self, prop: Property) -> Property:
        prop.id = f"prop-{uuid.uuid4().hex[:12]}"
        self._session.add(prop)
        await self._session.commit()
        return prop

    async def get(self, property_id: str) -> Optional[Property]:
        result = await self._session.execute(select(Property).where(Property.id == property_id))
        return result.scalar_one_or_none()
