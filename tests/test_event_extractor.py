"""
Tests for event normalization.
"""

from services.event_extractor import (
    DEFAULT_FAILURE_MESSAGE,
    PaymentFailed,
    PaymentSucceeded,
    Unhandled,
    extract_event,
    extract_payment_failed,
    extract_payment_succeeded,
)
from services.signature_verifier import ProviderEvent


def _event(event_type, intent):
    return ProviderEvent.model_validate({
        "id": "evt_1",
        "type": event_type,
        "data": {"object": intent},
    })


class TestExtractPaymentSucceeded:

    def test_extracts_payment_fields(self):
        event = _event("payment_intent.succeeded", {
            "id": "pi_1",
            "amount": 85000,
            "customer": "cus_9",
            "metadata": {"invoiceId": "inv_1"},
        })

        result = extract_payment_succeeded(event)

        assert result == PaymentSucceeded(
            payment_id="pi_1", amount_minor_units=85000, invoice_id="inv_1", customer_id="cus_9"
        )

    def test_missing_metadata_gives_no_invoice(self):
        event = _event("payment_intent.succeeded", {"id": "pi_1", "amount": 500})
        assert extract_payment_succeeded(event).invoice_id is None

    def test_blank_invoice_id_treated_as_missing(self):
        event = _event("payment_intent.succeeded", {
            "id": "pi_1", "amount": 500, "metadata": {"invoiceId": "  "},
        })
        assert extract_payment_succeeded(event).invoice_id is None

    def test_snake_case_metadata_key_accepted(self):
        event = _event("payment_intent.succeeded", {
            "id": "pi_1", "amount": 500, "metadata": {"invoice_id": "inv_7"},
        })
        assert extract_payment_succeeded(event).invoice_id == "inv_7"

    def test_expanded_customer_object(self):
        event = _event("payment_intent.succeeded", {
            "id": "pi_1", "amount": 500, "customer": {"id": "cus_expanded"},
        })
        assert extract_payment_succeeded(event).customer_id == "cus_expanded"

    def test_other_type_returns_none(self):
        event = _event("payment_intent.payment_failed", {"id": "pi_1"})
        assert extract_payment_succeeded(event) is None


class TestExtractPaymentFailed:

    def test_uses_last_payment_error_message(self):
        event = _event("payment_intent.payment_failed", {
            "id": "pi_2",
            "metadata": {"invoiceId": "inv_1"},
            "last_payment_error": {"message": "Your card was declined."},
        })

        assert extract_payment_failed(event) == PaymentFailed(
            payment_id="pi_2", invoice_id="inv_1", error_message="Your card was declined."
        )

    def test_default_message_when_absent(self):
        event = _event("payment_intent.payment_failed", {"id": "pi_2", "metadata": {"invoiceId": "inv_1"}})
        assert extract_payment_failed(event).error_message == DEFAULT_FAILURE_MESSAGE

    def test_null_last_payment_error(self):
        event = _event("payment_intent.payment_failed", {"id": "pi_2", "last_payment_error": None})
        assert extract_payment_failed(event).error_message == DEFAULT_FAILURE_MESSAGE


class TestExtractEvent:

    def test_dispatches_by_type(self):
        succeeded = _event("payment_intent.succeeded", {"id": "pi_1", "amount": 1})
        failed = _event("payment_intent.payment_failed", {"id": "pi_1"})

        assert isinstance(extract_event(succeeded), PaymentSucceeded)
        assert isinstance(extract_event(failed), PaymentFailed)

    def test_unknown_type_is_unhandled(self):
        event = _event("charge.refunded", {"id": "ch_1"})
        assert extract_event(event) == Unhandled(event_type="charge.refunded")


class TestMalformedFields:

    def test_non_object_metadata_gives_no_invoice(self):
        event = _event("payment_intent.succeeded", {"id": "pi_1", "amount": 500, "metadata": "inv_1"})
        assert extract_payment_succeeded(event).invoice_id is None

    def test_non_object_last_payment_error(self):
        event = _event("payment_intent.payment_failed", {"id": "pi_2", "last_payment_error": "declined"})
        assert extract_payment_failed(event).error_message == DEFAULT_FAILURE_MESSAGE

    def test_non_string_customer_ignored(self):
        event = _event("payment_intent.succeeded", {"id": "pi_1", "amount": 500, "customer": 42})
        assert extract_payment_succeeded(event).customer_id is None
