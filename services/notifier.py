# services/notifier.py
"""
In-app notifications for payment outcomes.

Payment events carry no practice id, so the owning practice is resolved by
re-reading the invoice. A missing invoice just means no notification.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from models import Invoice, Notification
from services.reconciler import OUTCOME_FAILED, OUTCOME_SUCCEEDED, ReconciliationResult

logger = logging.getLogger(__name__)

PAYMENT_RECEIVED = "payment_received"
PAYMENT_FAILED = "payment_failed"


class PaymentNotifier:

     def notify(self, db: Session, result: ReconciliationResult) -> Optional[Notification]:
          if result.outcome not in (OUTCOME_SUCCEEDED, OUTCOME_FAILED) or not result.invoice_id:
               return None

          invoice = db.get(Invoice, result.invoice_id)
          if invoice is None:
               logger.warning("Invoice %s not found; skipping payment notification", result.invoice_id)
               return None

          if result.outcome == OUTCOME_SUCCEEDED:
               notification = Notification(
                    practice_id=invoice.practice_id,
                    type=PAYMENT_RECEIVED,
                    title="Payment Received",
                    message=f"Payment for invoice {invoice.invoice_number} has been processed successfully.",
                    meta={"invoiceId": invoice.id, "amount": str(result.amount)},
               )
          else:
               notification = Notification(
                    practice_id=invoice.practice_id,
                    type=PAYMENT_FAILED,
                    title="Payment Failed",
                    message=f"Payment for invoice {invoice.invoice_number} failed: {result.error_message}",
                    meta={"invoiceId": invoice.id, "error": result.error_message},
               )

          db.add(notification)
          db.flush()
          return notification
