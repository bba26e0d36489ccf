# services/reconciler.py
"""
Invoice Reconciler - applies normalized payment events to invoices.

The caller runs ``apply`` inside a single database transaction together with
the ledger update, so a Payment row is never committed without the matching
Invoice change (and vice versa).
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from models import Invoice, InvoiceStatus, Payment, PaymentStatus
from models.base import utcnow
from services.errors import InvoiceNotFound
from services.event_extractor import NormalizedEvent, PaymentFailed, PaymentSucceeded, Unhandled
from utils.money import from_minor_units

logger = logging.getLogger(__name__)

OUTCOME_SUCCEEDED = "succeeded"
OUTCOME_FAILED = "failed"
OUTCOME_SKIPPED = "skipped"


@dataclass
class ReconciliationResult:
     outcome: str
     payment_id: Optional[str] = None
     invoice_id: Optional[str] = None
     practice_id: Optional[str] = None
     amount: Decimal = Decimal("0.00")
     customer_id: Optional[str] = None
     error_message: Optional[str] = None

     @property
     def applied(self) -> bool:
          return self.outcome in (OUTCOME_SUCCEEDED, OUTCOME_FAILED)


class InvoiceReconciler:
     """Writes Payment rows and invoice status changes for payment events."""

     def apply(self, db: Session, event: NormalizedEvent) -> ReconciliationResult:
          if isinstance(event, PaymentSucceeded):
               return self._apply_success(db, event)
          if isinstance(event, PaymentFailed):
               return self._apply_failure(db, event)
          if isinstance(event, Unhandled):
               return ReconciliationResult(outcome=OUTCOME_SKIPPED)
          raise TypeError(f"Unsupported event: {event!r}")

     def _load_invoice(self, db: Session, invoice_id: str) -> Invoice:
          invoice = (
               db.query(Invoice)
               .filter(Invoice.id == invoice_id)
               .with_for_update()
               .first()
          )
          if invoice is None:
               raise InvoiceNotFound(f"Invoice {invoice_id} referenced by payment event does not exist")
          return invoice

     def _apply_success(self, db: Session, event: PaymentSucceeded) -> ReconciliationResult:
          if not event.invoice_id:
               logger.info("Payment %s carries no invoice reference; nothing to reconcile", event.payment_id)
               return ReconciliationResult(outcome=OUTCOME_SKIPPED, payment_id=event.payment_id)

          existing = (
               db.query(Payment)
               .filter(
                    Payment.stripe_payment_id == event.payment_id,
                    Payment.status == PaymentStatus.COMPLETED,
               )
               .first()
          )
          if existing:
               logger.info("Payment %s already recorded", event.payment_id)
               return ReconciliationResult(
                    outcome=OUTCOME_SKIPPED,
                    payment_id=event.payment_id,
                    invoice_id=existing.invoice_id,
               )

          invoice = self._load_invoice(db, event.invoice_id)
          if invoice.status in (InvoiceStatus.PAID, InvoiceStatus.CANCELLED):
               logger.warning(
                    "Payment %s received for invoice %s in status %s",
                    event.payment_id, invoice.id, invoice.status.value,
               )

          amount = from_minor_units(event.amount_minor_units)
          db.add(Payment(
               invoice_id=invoice.id,
               amount=amount,
               stripe_payment_id=event.payment_id,
               status=PaymentStatus.COMPLETED,
               payment_method="card",
          ))
          invoice.apply_payment(amount, paid_at=utcnow())
          db.flush()

          logger.info("Invoice %s: %s applied by %s, status %s", invoice.id, amount, event.payment_id, invoice.status.value)
          return ReconciliationResult(
               outcome=OUTCOME_SUCCEEDED,
               payment_id=event.payment_id,
               invoice_id=invoice.id,
               practice_id=invoice.practice_id,
               amount=amount,
               customer_id=event.customer_id,
          )

     def _apply_failure(self, db: Session, event: PaymentFailed) -> ReconciliationResult:
          if not event.invoice_id:
               logger.info("Failed payment %s carries no invoice reference", event.payment_id)
               return ReconciliationResult(outcome=OUTCOME_SKIPPED, payment_id=event.payment_id)

          invoice = self._load_invoice(db, event.invoice_id)
          db.add(Payment(
               invoice_id=invoice.id,
               amount=Decimal("0.00"),
               stripe_payment_id=event.payment_id,
               status=PaymentStatus.FAILED,
               meta={"error": event.error_message},
          ))
          db.flush()

          logger.info("Recorded failed payment %s for invoice %s", event.payment_id, invoice.id)
          return ReconciliationResult(
               outcome=OUTCOME_FAILED,
               payment_id=event.payment_id,
               invoice_id=invoice.id,
               practice_id=invoice.practice_id,
               error_message=event.error_message,
          )
