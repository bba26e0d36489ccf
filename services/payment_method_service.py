# services/payment_method_service.py
"""
Saved cards of the current practice.

Cards live with the payment processor, on the practice's customer. The
customer always comes from the caller's practice; a card id sent by the
client is only acted on if it belongs to that customer (attach excepted,
which is how a new card joins it).
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy.orm import Session

from clients.stripe_gateway import SavedCard, StripeGateway
from dependencies import RequestContext
from models import Practice
from services.audit_service import (
     ACTION_PAYMENT_METHOD_ATTACHED,
     ACTION_PAYMENT_METHOD_DEFAULT_SET,
     ACTION_PAYMENT_METHOD_DETACHED,
     AuditRecorder,
)
from services.errors import PaymentMethodNotFound, PaymentMethodRequestFailed, PaymentProviderError, PracticeNotLinked
from services.payment_service import ensure_customer

logger = logging.getLogger(__name__)

ACTION_ATTACH = "attach"
ACTION_DETACH = "detach"
ACTION_SET_DEFAULT = "set_default"


@dataclass
class SavedCards:
     cards: List[SavedCard] = field(default_factory=list)
     default_payment_method_id: Optional[str] = None


def _practice(db: Session, ctx: RequestContext) -> Practice:
     practice = db.get(Practice, ctx.practice_id)
     if practice is None:
          raise PracticeNotLinked()
     return practice


def list_payment_methods(db: Session, ctx: RequestContext, gateway: StripeGateway) -> SavedCards:
     """Saved cards of the caller's practice; empty until it has a processor customer."""
     practice = _practice(db, ctx)
     if not practice.stripe_customer_id:
          return SavedCards()
     try:
          return SavedCards(
               cards=gateway.list_payment_methods(practice.stripe_customer_id),
               default_payment_method_id=gateway.get_default_payment_method(practice.stripe_customer_id),
          )
     except PaymentProviderError as e:
          raise PaymentMethodRequestFailed(e.detail, retryable=e.retryable) from e


def _require_owned(gateway: StripeGateway, customer_id: str, payment_method_id: str) -> None:
     if not any(card.id == payment_method_id for card in gateway.list_payment_methods(customer_id)):
          raise PaymentMethodNotFound()


def update_payment_method(
     db: Session,
     ctx: RequestContext,
     gateway: StripeGateway,
     action: str,
     payment_method_id: str,
     audit: Optional[AuditRecorder] = None,
) -> None:
     """
     Attach, detach or make default one card on the practice's customer.

     Raises:
          PaymentMethodNotFound: detach/set_default on a card the practice does not own
          PaymentMethodRequestFailed: the processor call failed
          ValueError: unknown action
     """
     practice = _practice(db, ctx)
     try:
          customer_id = ensure_customer(db, practice, gateway)
          if action == ACTION_ATTACH:
               gateway.attach_payment_method(payment_method_id, customer_id)
               audit_action = ACTION_PAYMENT_METHOD_ATTACHED
          elif action == ACTION_DETACH:
               _require_owned(gateway, customer_id, payment_method_id)
               gateway.detach_payment_method(payment_method_id)
               audit_action = ACTION_PAYMENT_METHOD_DETACHED
          elif action == ACTION_SET_DEFAULT:
               _require_owned(gateway, customer_id, payment_method_id)
               gateway.set_default_payment_method(customer_id, payment_method_id)
               audit_action = ACTION_PAYMENT_METHOD_DEFAULT_SET
          else:
               raise ValueError(f"Unknown payment method action: {action}")
     except PaymentProviderError as e:
          raise PaymentMethodRequestFailed(e.detail, retryable=e.retryable) from e

     logger.info("Payment method %s: %s for practice %s", payment_method_id, action, practice.id)
     (audit or AuditRecorder()).try_record(
          db,
          audit_action,
          "payment_method",
          resource_id=payment_method_id,
          practice_id=ctx.practice_id,
          user_id=ctx.user_id,
          metadata={"customerId": customer_id},
     )
