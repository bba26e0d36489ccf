"""
Tests for the invoice API.

Covers:
- Practice scoping on list and detail
- Derived overdue status and filtering
- Balance summary and payment history
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from database import session_scope
from models import Invoice, InvoiceStatus, Payment, PaymentStatus
from tests.helpers import OTHER_AUTH_USER_ID, make_token


@pytest.fixture
def overdue_invoice(seed, session_factory):
    with session_scope(session_factory) as s:
        s.add(Invoice(
            id="inv_late", practice_id="prac_1", invoice_number="INV-0999",
            amount=Decimal("200.00"), amount_paid=Decimal("50.00"),
            status=InvoiceStatus.PENDING, due_date=date.today() - timedelta(days=3),
        ))


@pytest.mark.usefixtures("seed")
class TestListInvoices:

    def test_only_own_practice_invoices(self, auth_client):
        response = auth_client.get("/api/invoices")

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert {inv["id"] for inv in body["invoices"]} == {"inv_1", "inv_2"}

    def test_other_practice_sees_its_own(self, app):
        client = TestClient(app, cookies={"sb-access-token": make_token(OTHER_AUTH_USER_ID)})

        body = client.get("/api/invoices").json()

        assert [inv["id"] for inv in body["invoices"]] == ["inv_other"]

    def test_amounts_and_summary(self, auth_client):
        body = auth_client.get("/api/invoices").json()

        inv_1 = next(inv for inv in body["invoices"] if inv["id"] == "inv_1")
        assert Decimal(inv_1["amount"]) == Decimal("850.00")
        assert Decimal(inv_1["balance_due"]) == Decimal("850.00")
        assert inv_1["status"] == "pending"

        assert Decimal(body["summary"]["total_owed"]) == Decimal("970.00")
        assert body["summary"]["outstanding_count"] == 2
        assert body["summary"]["paid_count"] == 0

    def test_pagination(self, auth_client):
        body = auth_client.get("/api/invoices", params={"page": 2, "page_size": 1}).json()

        assert body["total"] == 2
        assert body["page"] == 2
        assert len(body["invoices"]) == 1

    def test_invalid_status_rejected(self, auth_client):
        assert auth_client.get("/api/invoices", params={"status": "lost"}).status_code == 422


@pytest.mark.usefixtures("overdue_invoice")
class TestOverdue:

    def test_past_due_invoice_reported_overdue(self, auth_client):
        body = auth_client.get("/api/invoices").json()

        late = next(inv for inv in body["invoices"] if inv["id"] == "inv_late")
        assert late["status"] == "overdue"
        assert Decimal(body["summary"]["overdue_amount"]) == Decimal("150.00")
        assert body["summary"]["overdue_count"] == 1

    def test_filter_overdue(self, auth_client):
        body = auth_client.get("/api/invoices", params={"status": "overdue"}).json()
        assert [inv["id"] for inv in body["invoices"]] == ["inv_late"]

    def test_filter_pending_excludes_overdue(self, auth_client):
        body = auth_client.get("/api/invoices", params={"status": "pending"}).json()
        assert {inv["id"] for inv in body["invoices"]} == {"inv_1", "inv_2"}


@pytest.mark.usefixtures("seed")
class TestGetInvoice:

    def test_detail_with_payments(self, auth_client, session_factory):
        with session_scope(session_factory) as s:
            s.add(Payment(
                invoice_id="inv_1", amount=Decimal("0.00"), stripe_payment_id="pi_f",
                status=PaymentStatus.FAILED, meta={"error": "Your card was declined."},
            ))

        response = auth_client.get("/api/invoices/inv_1")

        assert response.status_code == 200
        body = response.json()
        assert body["invoice_number"] == "INV-1001"
        assert len(body["payments"]) == 1
        assert body["payments"][0]["status"] == "failed"
        assert body["payments"][0]["error"] == "Your card was declined."

    def test_other_practice_invoice_is_404(self, auth_client):
        response = auth_client.get("/api/invoices/inv_other")

        assert response.status_code == 404
        assert response.json() == {"error": "Invoice not found"}

    def test_unknown_invoice_is_404(self, auth_client):
        assert auth_client.get("/api/invoices/nope").status_code == 404
