# services/event_extractor.py
"""
Normalize verified payment processor events.

Downstream code only ever sees one of PaymentSucceeded, PaymentFailed or
Unhandled, so every event kind the reconciler can receive is handled
explicitly.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from services.signature_verifier import ProviderEvent

PAYMENT_SUCCEEDED = "payment_intent.succeeded"
PAYMENT_FAILED = "payment_intent.payment_failed"

DEFAULT_FAILURE_MESSAGE = "Payment failed"


@dataclass(frozen=True)
class PaymentSucceeded:
     payment_id: str
     amount_minor_units: int
     invoice_id: Optional[str]
     customer_id: Optional[str] = None


@dataclass(frozen=True)
class PaymentFailed:
     payment_id: str
     invoice_id: Optional[str]
     error_message: str


@dataclass(frozen=True)
class Unhandled:
     event_type: str


NormalizedEvent = Union[PaymentSucceeded, PaymentFailed, Unhandled]


def _as_dict(value: Any) -> Dict[str, Any]:
     return value if isinstance(value, dict) else {}


def _invoice_id(payment_intent: Dict[str, Any]) -> Optional[str]:
     metadata = _as_dict(payment_intent.get("metadata"))
     value = metadata.get("invoiceId") or metadata.get("invoice_id")
     if value is None:
          return None
     value = str(value).strip()
     return value or None


def _customer_id(payment_intent: Dict[str, Any]) -> Optional[str]:
     customer = payment_intent.get("customer")
     if isinstance(customer, dict):
          return customer.get("id")
     return customer if isinstance(customer, str) and customer else None


def extract_payment_succeeded(event: ProviderEvent) -> Optional[PaymentSucceeded]:
     if event.type != PAYMENT_SUCCEEDED:
          return None
     payment_intent = event.data.obj
     return PaymentSucceeded(
          payment_id=payment_intent.get("id", ""),
          amount_minor_units=int(payment_intent.get("amount") or 0),
          invoice_id=_invoice_id(payment_intent),
          customer_id=_customer_id(payment_intent),
     )


def extract_payment_failed(event: ProviderEvent) -> Optional[PaymentFailed]:
     if event.type != PAYMENT_FAILED:
          return None
     payment_intent = event.data.obj
     last_error = _as_dict(payment_intent.get("last_payment_error"))
     return PaymentFailed(
          payment_id=payment_intent.get("id", ""),
          invoice_id=_invoice_id(payment_intent),
          error_message=last_error.get("message") or DEFAULT_FAILURE_MESSAGE,
     )


def extract_event(event: ProviderEvent) -> NormalizedEvent:
     """Map a verified event onto the closed set of shapes the reconciler handles."""
     normalized = extract_payment_succeeded(event) or extract_payment_failed(event)
     if normalized is None:
          return Unhandled(event_type=event.type)
     return normalized
