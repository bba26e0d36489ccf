# routers/payments.py
"""
Payment API.

POST /api/payments/create-intent: start a card payment for one of the
caller's invoices. The invoice is marked paid later, when the processor's
webhook reports the outcome.
"""
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from clients.stripe_gateway import StripeGateway
from database import get_session
from dependencies import RequestContext, get_payment_gateway, get_request_context
from schemas.payment import CreateIntentRequest, CreateIntentResponse
from services.payment_service import create_payment_intent

router = APIRouter(prefix="/api/payments", tags=["payments"])


@router.post(
     "/create-intent",
     response_model=CreateIntentResponse,
     status_code=status.HTTP_200_OK,
     summary="Create payment intent",
)
def create_intent(
     body: CreateIntentRequest,
     request: Request,
     db: Session = Depends(get_session),
     ctx: RequestContext = Depends(get_request_context),
     gateway: StripeGateway = Depends(get_payment_gateway),
):
     """
     Create a PaymentIntent for the invoice's remaining balance.

     1. Loads the invoice within the caller's practice (404 otherwise).
     2. Rejects paid/cancelled invoices and invoices with nothing due (400).
     3. Creates the processor customer for the practice on first use.
     4. Records a ``payment_intent_created`` audit entry.
     """
     started = create_payment_intent(
          db,
          ctx,
          gateway,
          body.invoice_id,
          ip_address=request.client.host if request.client else None,
          user_agent=request.headers.get("user-agent"),
     )
     return CreateIntentResponse(client_secret=started.client_secret, amount=started.amount)
