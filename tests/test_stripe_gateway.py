"""
Tests for StripeGateway, with the SDK calls patched out.
"""

from types import SimpleNamespace
from unittest.mock import patch

import pytest
import stripe

from clients.stripe_gateway import SavedCard, StripeGateway
from services.errors import PaymentProviderError


class TestStripeGateway:

    def test_requires_api_key(self):
        with pytest.raises(PaymentProviderError):
            StripeGateway("").create_payment_intent(100, "cus_1", "inv_1")

    @patch("stripe.PaymentIntent.create")
    def test_invoice_id_in_metadata(self, create):
        create.return_value = SimpleNamespace(id="pi_9", client_secret="pi_9_secret")

        result = StripeGateway("sk_test", currency="usd").create_payment_intent(
            85000, "cus_1", "inv_1", metadata={"practiceId": "prac_1"}
        )

        assert result.id == "pi_9"
        assert result.client_secret == "pi_9_secret"
        kwargs = create.call_args.kwargs
        assert kwargs["amount"] == 85000
        assert kwargs["currency"] == "usd"
        assert kwargs["metadata"] == {"invoiceId": "inv_1", "practiceId": "prac_1"}
        assert kwargs["api_key"] == "sk_test"

    @patch("stripe.PaymentIntent.create")
    def test_connection_error_is_retryable(self, create):
        create.side_effect = stripe.APIConnectionError("network down")

        with pytest.raises(PaymentProviderError) as exc_info:
            StripeGateway("sk_test").create_payment_intent(100, "cus_1", "inv_1")

        assert exc_info.value.retryable is True
        assert exc_info.value.status_code == 502

    @patch("stripe.PaymentIntent.create")
    def test_card_error_is_not_retryable(self, create):
        create.side_effect = stripe.InvalidRequestError("No such customer", param="customer")

        with pytest.raises(PaymentProviderError) as exc_info:
            StripeGateway("sk_test").create_payment_intent(100, "cus_missing", "inv_1")

        assert exc_info.value.retryable is False

    @patch("stripe.Customer.create")
    @patch("stripe.Customer.list")
    def test_customer_reused_by_email(self, list_customers, create_customer):
        list_customers.return_value = SimpleNamespace(data=[SimpleNamespace(id="cus_found")])

        customer_id = StripeGateway("sk_test").get_or_create_customer("prac_1", "Bright Smiles", "a@b.test")

        assert customer_id == "cus_found"
        create_customer.assert_not_called()

    @patch("stripe.Customer.create")
    @patch("stripe.Customer.list")
    def test_customer_created_when_absent(self, list_customers, create_customer):
        list_customers.return_value = SimpleNamespace(data=[])
        create_customer.return_value = SimpleNamespace(id="cus_new")

        customer_id = StripeGateway("sk_test").get_or_create_customer("prac_1", "Bright Smiles", "a@b.test")

        assert customer_id == "cus_new"
        assert create_customer.call_args.kwargs["metadata"] == {"practiceId": "prac_1"}


class TestSavedCards:

    @patch("stripe.PaymentMethod.list")
    def test_list_payment_methods(self, list_methods):
        list_methods.return_value = SimpleNamespace(data=[
            SimpleNamespace(
                id="pm_1",
                card=SimpleNamespace(brand="visa", last4="4242", exp_month=4, exp_year=2030),
            ),
        ])

        cards = StripeGateway("sk_test").list_payment_methods("cus_1")

        assert cards == [SavedCard(id="pm_1", brand="visa", last4="4242", exp_month=4, exp_year=2030)]
        assert list_methods.call_args.kwargs["customer"] == "cus_1"
        assert list_methods.call_args.kwargs["type"] == "card"

    @patch("stripe.Customer.retrieve")
    def test_default_payment_method(self, retrieve):
        retrieve.return_value = SimpleNamespace(
            id="cus_1", invoice_settings=SimpleNamespace(default_payment_method="pm_1")
        )

        assert StripeGateway("sk_test").get_default_payment_method("cus_1") == "pm_1"

    @patch("stripe.Customer.retrieve")
    def test_expanded_default_payment_method(self, retrieve):
        retrieve.return_value = SimpleNamespace(
            id="cus_1", invoice_settings=SimpleNamespace(default_payment_method=SimpleNamespace(id="pm_2"))
        )

        assert StripeGateway("sk_test").get_default_payment_method("cus_1") == "pm_2"

    @patch("stripe.Customer.modify")
    def test_set_default_payment_method(self, modify):
        StripeGateway("sk_test").set_default_payment_method("cus_1", "pm_1")

        assert modify.call_args.args == ("cus_1",)
        assert modify.call_args.kwargs["invoice_settings"] == {"default_payment_method": "pm_1"}

    @patch("stripe.PaymentMethod.attach")
    def test_attach_error_mapped(self, attach):
        attach.side_effect = stripe.InvalidRequestError("already attached", param="payment_method")

        with pytest.raises(PaymentProviderError):
            StripeGateway("sk_test").attach_payment_method("pm_1", "cus_1")

    @patch("stripe.PaymentMethod.detach")
    def test_detach(self, detach):
        StripeGateway("sk_test").detach_payment_method("pm_1")
        assert detach.call_args.args == ("pm_1",)
