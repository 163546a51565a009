"""
Tenant application intake: validate, charge the advance payment, reject duplicates,
persist, notify the applicant, archive a snapshot and record analytics.

Two failure conventions:
- bad input or a duplicate raises an IntakeError subclass;
- a declined payment returns IntakeResult(status="rejected") and raises nothing.
"""
from __future__ import annotations

import asyncio
import logging
import weakref
from decimal import Decimal
from typing import Optional, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from models import TenantApplication
from schemas.application import IntakeResult
from services.collaborators import (
    Analytics,
    ApplicationStore,
    Archiver,
    AuditLog,
    DatabaseAuditLog,
    FileArchiver,
    LoggingAnalytics,
    LoggingNotifier,
    Notifier,
)
from services.settlement import PaymentError, parse_amount, settle

logger = logging.getLogger(__name__)

# The workflow never collects a real CVV
PLACEHOLDER_SECURITY_CODE = "123"
MIN_PHONE_LENGTH = 10


class IntakeError(Exception):
    pass


class ApplicationValidationError(IntakeError):
    pass


class DuplicateApplication(IntakeError):
    pass


class PaymentProcessor(Protocol):
    def make_payment(
        self, card_number: str, card_expiry: str, security_code: str, amount: Decimal
    ) -> Optional[str]: ...


class SettlementPaymentProcessor:
    """Charges through the settlement calculator; a settlement error is a decline (None)."""

    def __init__(self, audit: AuditLog, currency: str = "GBP", international: bool = False):
        self._audit = audit
        self._currency = currency
        self._international = international

    def make_payment(
        self, card_number: str, card_expiry: str, security_code: str, amount: Decimal
    ) -> Optional[str]:
        try:
            outcome = settle(
                card_number,
                card_expiry,
                security_code,
                amount,
                currency=self._currency,
                international=self._international,
                audit=self._audit,
            )
        except PaymentError as e:
            logger.info("Payment declined: %s", e)
            return None
        return outcome.transaction_id


class ApplicationIntakeWorkflow:
    # Shared across instances so concurrent requests for one email queue up in-process
    _email_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()

    def __init__(
        self,
        store: ApplicationStore,
        payments: PaymentProcessor,
        notifier: Notifier,
        audit: AuditLog,
        analytics: Analytics,
        archiver: Archiver,
    ):
        self.store = store
        self.payments = payments
        self.notifier = notifier
        self.audit = audit
        self.analytics = analytics
        self.archiver = archiver

    def _lock_for(self, email: str) -> asyncio.Lock:
        lock = self._email_locks.get(email)
        if lock is None:
            lock = asyncio.Lock()
            self._email_locks[email] = lock
        return lock

    def _reject_input(self, audit_message: str, error: str) -> None:
        self.audit.log(audit_message)
        raise ApplicationValidationError(error)

    def validate(
        self,
        applicant_name: str,
        applicant_phone: str,
        applicant_email: str,
        card_number: str,
        card_expiry: str,
        amount_paid: Optional[Decimal],
    ) -> None:
        if not _present(applicant_name) or not _present(applicant_phone) or not _present(applicant_email):
            suffix = f" for applicant: {applicant_email}" if _present(applicant_email) else ""
            self._reject_input(
                f"Invalid applicant details provided{suffix}.",
                "Applicant details cannot be null or empty.",
            )
        if not _present(card_number) or not _present(card_expiry) or amount_paid is None or amount_paid <= 0:
            self._reject_input(
                f"Invalid payment details for applicant: {applicant_email}",
                "Invalid payment details.",
            )
        if len(applicant_phone) < MIN_PHONE_LENGTH or not applicant_phone.isdecimal():
            self._reject_input(
                f"Invalid phone number for applicant: {applicant_email}",
                "Invalid phone number.",
            )

    async def submit(
        self,
        applicant_name: str,
        applicant_phone: str,
        applicant_email: str,
        card_number: str,
        card_expiry: str,
        amount_paid: Decimal | int | str | None,
    ) -> IntakeResult:
        amount_paid = parse_amount(amount_paid)
        self.validate(applicant_name, applicant_phone, applicant_email, card_number, card_expiry, amount_paid)

        async with self._lock_for(applicant_email):
            return await self._charge_and_record(
                applicant_name, applicant_phone, applicant_email, card_number, card_expiry, amount_paid
            )

    async def _charge_and_record(
        self,
        applicant_name: str,
        applicant_phone: str,
        applicant_email: str,
        card_number: str,
        card_expiry: str,
        amount_paid: Decimal,
    ) -> IntakeResult:
        transaction_id = self.payments.make_payment(
            card_number, card_expiry, PLACEHOLDER_SECURITY_CODE, amount_paid
        )
        if not transaction_id:
            self.audit.log(f"Payment failed for applicant: {applicant_email}")
            return IntakeResult(status="rejected", reason="Payment failed.")

        # Runs after capture and nothing is refunded; see DESIGN.md
        if await self.store.find_by_email(applicant_email) is not None:
            self.audit.log(f"Duplicate application detected for applicant: {applicant_email}")
            raise DuplicateApplication("Duplicate application not allowed.")

        application = TenantApplication(
            applicant_name=applicant_name,
            applicant_phone=applicant_phone,
            applicant_email=applicant_email,
            card_number=card_number,
            card_expiry_date=card_expiry,
            amount_paid=amount_paid,
        )
        application = await self.store.insert(application)
        self.audit.log(f"Application received for applicant: {applicant_name}")

        self._notify(application)
        self._archive(application)

        self.analytics.track_event(
            "TenantApplicationSubmitted",
            {
                "ApplicantName": applicant_name,
                "ApplicantEmail": applicant_email,
                "AmountPaid": str(amount_paid),
            },
        )
        logger.info("Application processing complete for applicant: %s", applicant_name)
        return IntakeResult(status="completed", application_id=application.id)

    def _notify(self, application: TenantApplication) -> None:
        """Email then SMS; either may fail without undoing the stored application."""
        try:
            self.notifier.send_email(
                application.applicant_email,
                "Application Submitted",
                f"Dear {application.applicant_name}, your application has been successfully submitted.",
            )
        except Exception:
            logger.exception("Email notification failed for application %s", application.id)

        status_message = (
            f"Dear {application.applicant_name},\n\n"
            f"Thank you for your application for the property. Your application ID is {application.id}.\n\n"
            "We will review your submission and contact you shortly."
        )
        try:
            self.notifier.send_sms(application.applicant_phone, status_message)
        except Exception:
            logger.exception("SMS notification failed for application %s", application.id)
            return
        self.audit.log(f"Sent application status notification to: {application.applicant_phone}")

    def _archive(self, application: TenantApplication) -> None:
        content = (
            f"Applicant: {application.applicant_name}\n"
            f"Email: {application.applicant_email}\n"
            f"Phone: {application.applicant_phone}\n"
            f"Amount Paid: {application.amount_paid}"
        )
        self.archiver.save_file(f"application_{application.id}_archive.txt", content.encode("utf-8"))
        self.audit.log(f"Archived application data for ID: {application.id}")


def _present(value: Optional[str]) -> bool:
    return bool(value and value.strip())


def build_intake_workflow(session: AsyncSession) -> ApplicationIntakeWorkflow:
    """Wire the workflow with the default adapters for one request's session."""
    audit = DatabaseAuditLog(session)
    return ApplicationIntakeWorkflow(
        store=ApplicationStore(session),
        payments=SettlementPaymentProcessor(audit, currency=settings.default_currency),
        notifier=LoggingNotifier(),
        audit=audit,
        analytics=LoggingAnalytics(),
        archiver=FileArchiver(settings.archive_dir),
    )
