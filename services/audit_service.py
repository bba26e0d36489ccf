# services/audit_service.py
"""
Audit Recorder - append-only audit trail.

``record`` raises on database errors; ``try_record`` is for callers whose own
work must not depend on the audit write (it isolates the insert in a SAVEPOINT
and logs a warning instead of raising).
"""
import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models import AuditLog
from services.reconciler import OUTCOME_FAILED, OUTCOME_SUCCEEDED, ReconciliationResult

logger = logging.getLogger(__name__)

ACTION_PAYMENT_COMPLETED = "payment_completed"
ACTION_PAYMENT_FAILED = "payment_failed"
ACTION_PAYMENT_INTENT_CREATED = "payment_intent_created"
ACTION_NOTIFICATION_DELETED = "notification_deleted"
ACTION_PAYMENT_METHOD_ATTACHED = "payment_method_attached"
ACTION_PAYMENT_METHOD_DETACHED = "payment_method_detached"
ACTION_PAYMENT_METHOD_DEFAULT_SET = "payment_method_default_set"


class AuditRecorder:

     def record(
          self,
          db: Session,
          action: str,
          resource_type: str,
          resource_id: Optional[str] = None,
          practice_id: Optional[str] = None,
          user_id: Optional[str] = None,
          metadata: Optional[Dict[str, Any]] = None,
          ip_address: Optional[str] = None,
          user_agent: Optional[str] = None,
     ) -> AuditLog:
          entry = AuditLog(
               action=action,
               resource_type=resource_type,
               resource_id=resource_id,
               practice_id=practice_id,
               user_id=user_id,
               meta=metadata or {},
               ip_address=ip_address,
               user_agent=user_agent,
          )
          db.add(entry)
          db.flush()
          return entry

     def try_record(self, db: Session, action: str, resource_type: str, **kwargs) -> Optional[AuditLog]:
          try:
               with db.begin_nested():
                    return self.record(db, action, resource_type, **kwargs)
          except SQLAlchemyError:
               logger.warning("Audit entry %s for %s could not be written", action, resource_type, exc_info=True)
               return None

     def record_reconciliation(self, db: Session, result: ReconciliationResult) -> Optional[AuditLog]:
          """One audit row per applied payment event; skipped events leave no trace."""
          if result.outcome == OUTCOME_SUCCEEDED:
               action = ACTION_PAYMENT_COMPLETED
               metadata = {
                    "invoiceId": result.invoice_id,
                    "amount": str(result.amount),
                    "customerId": result.customer_id,
               }
          elif result.outcome == OUTCOME_FAILED:
               action = ACTION_PAYMENT_FAILED
               metadata = {"invoiceId": result.invoice_id, "error": result.error_message}
          else:
               return None

          return self.record(
               db,
               action=action,
               resource_type="payment",
               resource_id=result.payment_id,
               practice_id=result.practice_id,
               metadata=metadata,
          )
