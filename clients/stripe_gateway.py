# clients/stripe_gateway.py
"""
Payment processor client.

One StripeGateway is constructed at start-up with the secret key and kept on
``app.state``; routes receive it through ``dependencies.get_payment_gateway``.
The key is passed per call so no global SDK state is touched.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

import stripe

from services.errors import PaymentProviderError

logger = logging.getLogger(__name__)


@dataclass
class PaymentIntentResult:
     id: str
     client_secret: str
     amount: int


@dataclass
class SavedCard:
     id: str
     brand: Optional[str] = None
     last4: Optional[str] = None
     exp_month: Optional[int] = None
     exp_year: Optional[int] = None


class StripeGateway:

     def __init__(self, api_key: str, currency: str = "usd"):
          self._api_key = api_key
          self.currency = currency

     def _ensure_configured(self) -> None:
          if not self._api_key:
               raise PaymentProviderError("STRIPE_SECRET_KEY is not configured")

     def get_or_create_customer(self, practice_id: str, name: str, email: Optional[str] = None) -> str:
          """Return the processor customer id for a practice, creating it if needed."""
          self._ensure_configured()
          try:
               if email:
                    existing = stripe.Customer.list(email=email, limit=1, api_key=self._api_key)
                    if existing.data:
                         return existing.data[0].id

               customer = stripe.Customer.create(
                    name=name,
                    email=email,
                    metadata={"practiceId": practice_id},
                    api_key=self._api_key,
               )
               return customer.id
          except stripe.StripeError as e:
               raise self._provider_error("looking up customer", practice_id, e) from e

     def create_payment_intent(
          self,
          amount: int,
          customer_id: str,
          invoice_id: str,
          description: Optional[str] = None,
          metadata: Optional[Dict[str, str]] = None,
     ) -> PaymentIntentResult:
          """
          Create a PaymentIntent for an invoice.

          ``amount`` is in minor units. The invoice id goes into the intent's
          metadata so the webhook can correlate the payment back to it.
          """
          self._ensure_configured()
          try:
               intent = stripe.PaymentIntent.create(
                    amount=amount,
                    currency=self.currency,
                    customer=customer_id,
                    description=description or "Invoice payment",
                    metadata={"invoiceId": invoice_id, **(metadata or {})},
                    automatic_payment_methods={"enabled": True},
                    api_key=self._api_key,
               )
          except stripe.StripeError as e:
               raise self._provider_error("creating PaymentIntent", invoice_id, e) from e

          return PaymentIntentResult(id=intent.id, client_secret=intent.client_secret, amount=amount)

     def list_payment_methods(self, customer_id: str) -> List[SavedCard]:
          """Cards saved on the customer, as the processor reports them."""
          self._ensure_configured()
          try:
               methods = stripe.PaymentMethod.list(customer=customer_id, type="card", api_key=self._api_key)
          except stripe.StripeError as e:
               raise self._provider_error("listing payment methods", customer_id, e) from e

          return [
               SavedCard(
                    id=method.id,
                    brand=method.card.brand,
                    last4=method.card.last4,
                    exp_month=method.card.exp_month,
                    exp_year=method.card.exp_year,
               )
               for method in methods.data
          ]

     def get_default_payment_method(self, customer_id: str) -> Optional[str]:
          self._ensure_configured()
          try:
               customer = stripe.Customer.retrieve(customer_id, api_key=self._api_key)
          except stripe.StripeError as e:
               raise self._provider_error("retrieving customer", customer_id, e) from e

          default = customer.invoice_settings.default_payment_method
          if default is None or isinstance(default, str):
               return default
          return default.id

     def attach_payment_method(self, payment_method_id: str, customer_id: str) -> None:
          self._ensure_configured()
          try:
               stripe.PaymentMethod.attach(payment_method_id, customer=customer_id, api_key=self._api_key)
          except stripe.StripeError as e:
               raise self._provider_error("attaching payment method", customer_id, e) from e

     def detach_payment_method(self, payment_method_id: str) -> None:
          self._ensure_configured()
          try:
               stripe.PaymentMethod.detach(payment_method_id, api_key=self._api_key)
          except stripe.StripeError as e:
               raise self._provider_error("detaching payment method", payment_method_id, e) from e

     def set_default_payment_method(self, customer_id: str, payment_method_id: str) -> None:
          self._ensure_configured()
          try:
               stripe.Customer.modify(
                    customer_id,
                    invoice_settings={"default_payment_method": payment_method_id},
                    api_key=self._api_key,
               )
          except stripe.StripeError as e:
               raise self._provider_error("setting default payment method", customer_id, e) from e

     @staticmethod
     def _provider_error(action: str, reference: str, error: stripe.StripeError) -> PaymentProviderError:
          logger.error("Stripe error %s for %s: %s", action, reference, error)
          return PaymentProviderError(str(error), retryable=isinstance(error, stripe.APIConnectionError))
