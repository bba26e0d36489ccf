"""Shared builders for tests: Stripe-style signed payloads and session tokens."""

import hashlib
import hmac
import json
import time
from typing import Any, Dict, List, Optional

from jose import jwt

from clients.identity_provider import TokenPair
from clients.stripe_gateway import PaymentIntentResult, SavedCard

AUTH_USER_ID = "auth-user-1"
OTHER_AUTH_USER_ID = "auth-user-2"
UNLINKED_AUTH_USER_ID = "auth-user-unlinked"

WEBHOOK_SECRET = "whsec_test_secret"
JWT_SECRET = "test-jwt-secret"


def sign_payload(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: Optional[int] = None) -> str:
    """Build a stripe-signature header value for ``payload``."""
    timestamp = int(time.time()) if timestamp is None else timestamp
    signed = f"{timestamp}.".encode("utf-8") + payload
    signature = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


def payment_event(
    event_type: str = "payment_intent.succeeded",
    event_id: str = "evt_1",
    payment_id: str = "pi_1",
    amount: int = 85000,
    invoice_id: Optional[str] = "inv_1",
    error_message: Optional[str] = None,
) -> bytes:
    metadata: Dict[str, Any] = {}
    if invoice_id is not None:
        metadata["invoiceId"] = invoice_id
    intent: Dict[str, Any] = {
        "id": payment_id,
        "object": "payment_intent",
        "amount": amount,
        "currency": "usd",
        "customer": "cus_1",
        "metadata": metadata,
    }
    if error_message is not None:
        intent["last_payment_error"] = {"message": error_message}
    envelope = {
        "id": event_id,
        "object": "event",
        "type": event_type,
        "created": int(time.time()),
        "livemode": False,
        "data": {"object": intent},
    }
    return json.dumps(envelope).encode("utf-8")


def make_token(sub: str, secret: str = JWT_SECRET, expires_in: int = 3600, email: str = "dr@example.com") -> str:
    now = int(time.time())
    claims = {
        "sub": sub,
        "email": email,
        "aud": "authenticated",
        "role": "authenticated",
        "iat": now,
        "exp": now + expires_in,
    }
    return jwt.encode(claims, secret, algorithm="HS256")


class FakeGateway:
    """Stands in for StripeGateway; records every call."""

    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.customers: List[Dict[str, Any]] = []
        self.intents: List[Dict[str, Any]] = []
        self.cards: Dict[str, List[SavedCard]] = {}
        self.defaults: Dict[str, str] = {}
        self.detached: List[str] = []

    def get_or_create_customer(self, practice_id, name, email=None):
        if self.error:
            raise self.error
        self.customers.append({"practice_id": practice_id, "name": name, "email": email})
        return "cus_test_1"

    def create_payment_intent(self, amount, customer_id, invoice_id, description=None, metadata=None):
        if self.error:
            raise self.error
        self.intents.append({
            "amount": amount,
            "customer_id": customer_id,
            "invoice_id": invoice_id,
            "description": description,
            "metadata": metadata,
        })
        return PaymentIntentResult(id="pi_test_1", client_secret="pi_test_1_secret_abc", amount=amount)

    def list_payment_methods(self, customer_id):
        if self.error:
            raise self.error
        return list(self.cards.get(customer_id, []))

    def get_default_payment_method(self, customer_id):
        return self.defaults.get(customer_id)

    def attach_payment_method(self, payment_method_id, customer_id):
        if self.error:
            raise self.error
        self.cards.setdefault(customer_id, []).append(
            SavedCard(id=payment_method_id, brand="visa", last4="4242", exp_month=12, exp_year=2030)
        )

    def detach_payment_method(self, payment_method_id):
        self.detached.append(payment_method_id)
        for cards in self.cards.values():
            cards[:] = [card for card in cards if card.id != payment_method_id]

    def set_default_payment_method(self, customer_id, payment_method_id):
        self.defaults[customer_id] = payment_method_id


class FakeIdentityClient:
    """Stands in for IdentityProviderClient."""

    def __init__(self, tokens: Optional[TokenPair] = None):
        self.tokens = tokens
        self.refresh_calls: List[str] = []
        self.closed = False

    def refresh_session(self, refresh_token):
        self.refresh_calls.append(refresh_token)
        return self.tokens

    def close(self):
        self.closed = True
