# routers/payment_methods.py
"""
Saved payment methods (cards) of the caller's practice.

The practice, and so the processor customer, always comes from the request
context; the body only names the card and the action.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from clients.stripe_gateway import StripeGateway
from database import get_session
from dependencies import RequestContext, get_payment_gateway, get_request_context
from schemas.payment_method import (
     PaymentMethodActionRequest,
     PaymentMethodListResponse,
     PaymentMethodResponse,
)
from services import payment_method_service

router = APIRouter(prefix="/api/payment-methods", tags=["payment-methods"])


@router.get("", response_model=PaymentMethodListResponse, summary="List saved cards")
def list_payment_methods(
     db: Session = Depends(get_session),
     ctx: RequestContext = Depends(get_request_context),
     gateway: StripeGateway = Depends(get_payment_gateway),
):
     saved = payment_method_service.list_payment_methods(db, ctx, gateway)
     return PaymentMethodListResponse(
          payment_methods=[
               PaymentMethodResponse(
                    id=card.id,
                    brand=card.brand,
                    last4=card.last4,
                    exp_month=card.exp_month,
                    exp_year=card.exp_year,
                    is_default=card.id == saved.default_payment_method_id,
               )
               for card in saved.cards
          ],
          default_payment_method_id=saved.default_payment_method_id,
     )


@router.post("", summary="Attach, detach or set the default card")
def update_payment_method(
     body: PaymentMethodActionRequest,
     db: Session = Depends(get_session),
     ctx: RequestContext = Depends(get_request_context),
     gateway: StripeGateway = Depends(get_payment_gateway),
):
     """
     - **attach**: add a card (already confirmed in the browser) to the practice
     - **detach**: remove one of the practice's cards
     - **set_default**: use one of the practice's cards for future invoices
     """
     payment_method_service.update_payment_method(db, ctx, gateway, body.action, body.payment_method_id)
     return {"success": True}
