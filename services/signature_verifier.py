# services/signature_verifier.py
"""
Payment processor webhook verification.

Verification runs over the raw request body exactly as received. The body is
only decoded (UTF-8) for the SDK call and parsed after the signature checks
out; it is never re-serialized.
"""
import logging
from typing import Any, Dict, Optional

import stripe
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from services.errors import InvalidSignature, MissingSignatureHeader, WebhookNotConfigured

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "stripe-signature"


class EventData(BaseModel):
     model_config = ConfigDict(populate_by_name=True)

     obj: Dict[str, Any] = Field(default_factory=dict, alias="object")


class ProviderEvent(BaseModel):
     """Verified payment processor event envelope."""

     id: str = Field(..., min_length=1)
     type: str = Field(..., min_length=1)
     created: Optional[int] = None
     livemode: bool = False
     data: EventData = Field(default_factory=EventData)


def verify_event(
     payload: bytes,
     signature_header: Optional[str],
     secret: str,
     tolerance: int = stripe.Webhook.DEFAULT_TOLERANCE,
) -> ProviderEvent:
     """
     Verify a webhook delivery and return the parsed event.

     Raises:
          MissingSignatureHeader: header absent or blank (checked first)
          WebhookNotConfigured: no signing secret configured
          InvalidSignature: signature mismatch, stale timestamp, or a body that
               is not an event envelope
     """
     if not signature_header or not signature_header.strip():
          raise MissingSignatureHeader()

     if not secret:
          logger.error("Webhook signing secret is not configured")
          raise WebhookNotConfigured("STRIPE_WEBHOOK_SECRET is not configured")

     try:
          body = payload.decode("utf-8")
     except UnicodeDecodeError as e:
          raise InvalidSignature("Payload is not valid UTF-8") from e

     try:
          stripe.WebhookSignature.verify_header(body, signature_header, secret, tolerance)
     except stripe.SignatureVerificationError as e:
          raise InvalidSignature(str(e)) from e

     try:
          return ProviderEvent.model_validate_json(payload)
     except ValidationError as e:
          raise InvalidSignature("Payload is not a valid event envelope") from e
