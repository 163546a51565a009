"""
Tests for the HTTP routes: status codes, response bodies and the audit rows kept on rejection.
Run from the repository root: python -m pytest tests/test_api.py -v
"""
import tempfile
import unittest
from decimal import Decimal
from unittest.mock import patch

from fastapi.testclient import TestClient
from sqlalchemy import select

import database
from config import settings
from main import app
from models import AuditEntry
from services.intake import SettlementPaymentProcessor


def _application(**overrides):
    data = {
        "applicantName": "Ada Lovelace",
        "applicantPhone": "07700900123",
        "applicantEmail": "ada@example.com",
        "cardNumber": "4111111111111111",
        "cardExpiry": "12/29",
        "amountPaid": "750",
    }
    data.update(overrides)
    return data


class ApiTestCase(unittest.TestCase):
    """Runs the app against an in-memory database through the real get_db dependency."""

    def setUp(self):
        self.engine = database.make_engine("sqlite+aiosqlite:///:memory:")
        archive = tempfile.TemporaryDirectory()
        self.addCleanup(archive.cleanup)

        for p in (
            patch("database.AsyncSessionLocal", database.make_sessionmaker(self.engine)),
            patch("main.init_db", self._init_db),
            patch.object(settings, "archive_dir", archive.name),
        ):
            p.start()
            self.addCleanup(p.stop)

        self.client = TestClient(app)
        self.client.__enter__()
        self.addCleanup(self.client.__exit__, None, None, None)
        self.addCleanup(self.client.portal.call, self.engine.dispose)

    async def _init_db(self):
        await database.init_db(self.engine)

    async def _fetch_audit(self):
        async with database.AsyncSessionLocal() as session:
            result = await session.execute(select(AuditEntry.message).order_by(AuditEntry.id))
            return list(result.scalars().all())

    def audit_messages(self):
        return self.client.portal.call(self._fetch_audit)


class TestApplicationRoutes(ApiTestCase):
    def test_submit_then_fetch_masked(self):
        r = self.client.post("/api/applications", json=_application())
        self.assertEqual(r.status_code, 201)
        body = r.json()
        self.assertEqual(body["status"], "completed")
        self.assertTrue(body["id"].startswith("app-"))

        r = self.client.get(f"/api/applications/{body['id']}")
        self.assertEqual(r.status_code, 200)
        fetched = r.json()
        self.assertEqual(fetched["applicantEmail"], "ada@example.com")
        self.assertEqual(fetched["cardNumber"], "************1111")
        self.assertEqual(Decimal(fetched["amountPaid"]), Decimal("750"))

        r = self.client.get("/api/applications")
        self.assertEqual([a["id"] for a in r.json()], [body["id"]])

    def test_unknown_application_is_404(self):
        r = self.client.get("/api/applications/app-missing")
        self.assertEqual(r.status_code, 404)
        self.assertEqual(r.json()["detail"], "Application not found")

    def test_duplicate_is_409_and_audit_row_is_kept(self):
        self.assertEqual(self.client.post("/api/applications", json=_application()).status_code, 201)

        r = self.client.post("/api/applications", json=_application(applicantName="Someone Else"))
        self.assertEqual(r.status_code, 409)
        self.assertEqual(r.json()["detail"], "Duplicate application not allowed.")
        self.assertIn("Duplicate application detected for applicant: ada@example.com", self.audit_messages())
        self.assertEqual(len(self.client.get("/api/applications").json()), 1)

    def test_bad_phone_is_400_and_audit_row_is_kept(self):
        r = self.client.post("/api/applications", json=_application(applicantPhone="12345"))
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["detail"], "Invalid phone number.")
        self.assertEqual(self.audit_messages(), ["Invalid phone number for applicant: ada@example.com"])
        self.assertEqual(self.client.get("/api/applications").json(), [])

    def test_declined_payment_is_402(self):
        with patch.object(SettlementPaymentProcessor, "make_payment", return_value=None):
            r = self.client.post("/api/applications", json=_application())
        self.assertEqual(r.status_code, 402)
        self.assertEqual(r.json()["detail"], "Payment failed.")
        self.assertIn("Payment failed for applicant: ada@example.com", self.audit_messages())
        self.assertEqual(self.client.get("/api/applications").json(), [])


class TestSettleRoute(ApiTestCase):
    def _settle(self, **overrides):
        data = {"cardNumber": "4111111111111111", "cardExpiry": "12/29", "securityCode": "123"}
        data.update(overrides)
        return self.client.post("/api/payments/settle", json=data)

    def test_international_gbp_body(self):
        r = self._settle(amount="1000", currency="GBP", international=True)
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertEqual(body["gateway"], "InternationalGateway")
        self.assertEqual(Decimal(body["finalAmount"]), Decimal("1300"))
        self.assertEqual(Decimal(body["discount"]), Decimal("0"))
        self.assertTrue(body["transactionId"])

    def test_discounted_usd_body(self):
        body = self._settle(amount="2000", currency="USD", international=True).json()
        self.assertEqual(body["gateway"], "USDGateway")
        self.assertEqual(Decimal(body["finalAmount"]), Decimal("1900"))
        self.assertEqual(Decimal(body["discount"]), Decimal("100"))

    def test_unsupported_currency_is_400(self):
        r = self._settle(amount="100", currency="CAD", international=True)
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["detail"], "Unsupported currency: CAD")

    def test_invalid_details_is_400(self):
        r = self._settle(amount="100", cardNumber=" ")
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["detail"], "Invalid payment details.")


class TestHealth(ApiTestCase):
    def test_health(self):
        self.assertEqual(self.client.get("/health").json(), {"status": "ok"})


if __name__ == "__main__":
    unittest.main()
