# services/payment_service.py
"""
Payment Service - starts a card payment for an invoice.

The browser confirms the returned PaymentIntent directly with the processor;
the invoice only changes state when the processor's webhook arrives (see
services.webhook_processor).
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from clients.stripe_gateway import StripeGateway
from dependencies import RequestContext
from models import Practice
from models.invoice import InvoiceStatus
from services.audit_service import ACTION_PAYMENT_INTENT_CREATED, AuditRecorder
from services.errors import InvoiceNotPayable, PracticeNotLinked
from services.invoice_service import InvoiceService
from utils.money import to_minor_units

logger = logging.getLogger(__name__)


@dataclass
class PaymentIntentStarted:
     client_secret: str
     amount: Decimal
     payment_intent_id: str


def ensure_customer(db: Session, practice: Practice, gateway: StripeGateway) -> str:
     """Return the practice's processor customer id, creating and storing it on first use."""
     if not practice.stripe_customer_id:
          practice.stripe_customer_id = gateway.get_or_create_customer(
               practice.id, practice.name, practice.email
          )
          db.flush()
     return practice.stripe_customer_id


def create_payment_intent(
     db: Session,
     ctx: RequestContext,
     gateway: StripeGateway,
     invoice_id: str,
     audit: Optional[AuditRecorder] = None,
     ip_address: Optional[str] = None,
     user_agent: Optional[str] = None,
) -> PaymentIntentStarted:
     """
     Create a PaymentIntent for the remaining balance of one of the caller's invoices.

     Raises:
          InvoiceNotFound: not one of the caller's invoices
          InvoiceNotPayable: already paid, cancelled, or nothing due
          PracticeNotLinked: the caller's practice row is gone
          PaymentProviderError: the processor call failed
     """
     audit = audit or AuditRecorder()
     invoice = InvoiceService.get_invoice(db, ctx, invoice_id)

     if invoice.status == InvoiceStatus.PAID:
          raise InvoiceNotPayable("Invoice is already paid")
     if invoice.status == InvoiceStatus.CANCELLED:
          raise InvoiceNotPayable("Invoice has been cancelled")

     remaining = invoice.balance_due
     if remaining <= 0:
          raise InvoiceNotPayable("No balance due on this invoice")

     practice = db.get(Practice, ctx.practice_id)
     if practice is None:
          raise PracticeNotLinked()

     ensure_customer(db, practice, gateway)

     intent = gateway.create_payment_intent(
          amount=to_minor_units(remaining),
          customer_id=practice.stripe_customer_id,
          invoice_id=invoice.id,
          description=f"Payment for Invoice {invoice.invoice_number}",
          metadata={"practiceId": practice.id, "practiceName": practice.name},
     )
     logger.info("Created payment intent %s for invoice %s", intent.id, invoice.id)

     audit.try_record(
          db,
          ACTION_PAYMENT_INTENT_CREATED,
          "invoice",
          resource_id=invoice.id,
          practice_id=ctx.practice_id,
          user_id=ctx.user_id,
          metadata={"paymentIntentId": intent.id, "amount": str(remaining)},
          ip_address=ip_address,
          user_agent=user_agent,
     )

     return PaymentIntentStarted(
          client_secret=intent.client_secret,
          amount=remaining,
          payment_intent_id=intent.id,
     )
