# dependencies.py
"""
Shared FastAPI dependencies.

The authorization gate resolves the caller once per request and stores a
RequestContext on ``request.state``. Routes take that context explicitly and
pass it to every tenant-scoped service call; the practice id is never read
from client input.
"""
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from fastapi import HTTPException, Request, status

from models import UserRole

if TYPE_CHECKING:
     from clients.stripe_gateway import StripeGateway
     from services.webhook_processor import WebhookProcessor


@dataclass(frozen=True)
class RequestContext:
     """Identity and tenant of the current caller."""
     auth_user_id: str
     user_id: str
     practice_id: str
     role: UserRole


def get_request_context(request: Request) -> RequestContext:
     context: Optional[RequestContext] = getattr(request.state, "context", None)
     if context is None:
          if getattr(request.state, "principal", None) is None:
               raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
          raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User profile not found")
     return context


def get_payment_gateway(request: Request) -> "StripeGateway":
     return request.app.state.payment_gateway


def get_webhook_processor(request: Request) -> "WebhookProcessor":
     return request.app.state.webhook_processor
