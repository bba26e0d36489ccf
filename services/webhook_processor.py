# services/webhook_processor.py
"""
Payment webhook reconciliation pipeline.

inbound event -> signature check -> idempotency ledger -> event extraction
-> invoice reconciliation -> notification + audit entry

Each stage commits in its own session:
1. the ledger row, so concurrent deliveries of one event see each other;
2. Payment + Invoice + ledger outcome, as one transaction;
3. notification and audit entry, each best-effort.
"""
import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import (
     DBAPIError,
     InterfaceError,
     OperationalError,
     SQLAlchemyError,
     TimeoutError as PoolTimeoutError,
)
from sqlalchemy.orm import sessionmaker

from database import session_scope
from services.audit_service import AuditRecorder
from services.errors import (
     LedgerUnavailable,
     PortalError,
     ReconciliationPartialFailure,
     TransientProcessingError,
)
from services.event_extractor import Unhandled, extract_event
from services.idempotency_ledger import IdempotencyLedger
from services.notifier import PaymentNotifier
from services.reconciler import InvoiceReconciler, ReconciliationResult
from services.signature_verifier import verify_event

logger = logging.getLogger(__name__)

_TRANSIENT_ERRORS = (
     OperationalError,
     InterfaceError,
     PoolTimeoutError,
     ConnectionError,
     TimeoutError,
)


def is_retryable(error: Exception) -> bool:
     """True when a failed delivery should be retried by the payment processor."""
     if isinstance(error, PortalError):
          return error.retryable
     if isinstance(error, _TRANSIENT_ERRORS):
          return True
     if isinstance(error, DBAPIError) and error.connection_invalidated:
          return True
     return False


class WebhookProcessor:
     """
     Runs one webhook delivery through the reconciliation pipeline.

     Built once at start-up (see main.create_app); collaborators can be
     substituted for testing.
     """

     def __init__(
          self,
          session_factory: sessionmaker,
          webhook_secret: str,
          ledger: Optional[IdempotencyLedger] = None,
          reconciler: Optional[InvoiceReconciler] = None,
          notifier: Optional[PaymentNotifier] = None,
          audit: Optional[AuditRecorder] = None,
     ):
          self._session_factory = session_factory
          self._webhook_secret = webhook_secret
          self.ledger = ledger or IdempotencyLedger()
          self.reconciler = reconciler or InvoiceReconciler()
          self.notifier = notifier or PaymentNotifier()
          self.audit = audit or AuditRecorder()

     def process(self, payload: bytes, signature_header: Optional[str]) -> Dict[str, Any]:
          """
          Handle one delivery and return the acknowledgement body.

          Raises:
               MissingSignatureHeader, InvalidSignature, WebhookNotConfigured:
                    rejected at the boundary, nothing recorded
               LedgerUnavailable, TransientProcessingError: retryable failures
          """
          event = verify_event(payload, signature_header, self._webhook_secret)

          try:
               with session_scope(self._session_factory) as db:
                    ledger_result = self.ledger.check_and_record(db, event.id, event.type)
          except LedgerUnavailable:
               raise
          except SQLAlchemyError as e:
               logger.error("Could not record event %s in ledger: %s", event.id, e)
               raise LedgerUnavailable(str(e)) from e

          if not ledger_result.is_new:
               logger.info("Event %s already processed, skipping", event.id)
               return {"received": True, "duplicate": True}

          # Once the ledger row exists, every failure must be recorded on it
          try:
               normalized = extract_event(event)
               if isinstance(normalized, Unhandled):
                    logger.info("Unhandled event type: %s", normalized.event_type)

               with session_scope(self._session_factory) as db:
                    result = self.reconciler.apply(db, normalized)
                    self.ledger.mark_processed(db, event.id)
          except Exception as e:
               retryable = is_retryable(e)
               logger.error(
                    "Processing error for event %s (retryable=%s): %s",
                    event.id, retryable, e, exc_info=not isinstance(e, PortalError),
               )
               self._record_failure(event.id, e, retryable)
               if retryable:
                    raise TransientProcessingError(str(e)) from e
               return {"received": True, "error": "Webhook processing failed"}

          if result.applied:
               self._run_side_effects(event.id, result)
          return {"received": True}

     def _record_failure(self, event_id: str, error: Exception, retryable: bool) -> None:
          try:
               with session_scope(self._session_factory) as db:
                    self.ledger.mark_failed(db, event_id, str(error) or type(error).__name__, retryable)
          except SQLAlchemyError:
               logger.exception("Could not record failure for event %s", event_id)

     def _run_side_effects(self, event_id: str, result: ReconciliationResult) -> None:
          """Notification and audit writes; failures are logged, never raised."""
          try:
               with session_scope(self._session_factory) as db:
                    self.notifier.notify(db, result)
          except Exception as e:
               failure = ReconciliationPartialFailure(f"notification for event {event_id} not written: {e}")
               logger.warning("%s", failure, exc_info=True)

          try:
               with session_scope(self._session_factory) as db:
                    self.audit.record_reconciliation(db, result)
          except Exception as e:
               failure = ReconciliationPartialFailure(f"audit entry for event {event_id} not written: {e}")
               logger.warning("%s", failure, exc_info=True)
