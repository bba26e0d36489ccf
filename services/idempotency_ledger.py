# services/idempotency_ledger.py
"""
Idempotency ledger for inbound payment events.

check_and_record relies on the unique constraint on webhook_events.event_id:
the INSERT either wins (new event) or fails with an IntegrityError (already
seen). Two concurrent deliveries of one event id therefore cannot both be
told they are new. A row left in RETRYABLE by a transient failure can be
reclaimed by exactly one later delivery through a conditional UPDATE.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, OperationalError, DBAPIError
from sqlalchemy.orm import Session

from models import WebhookEvent, WebhookEventStatus
from models.base import utcnow
from services.errors import LedgerUnavailable

logger = logging.getLogger(__name__)


@dataclass
class LedgerResult:
     is_new: bool
     entry: Optional[WebhookEvent] = None


class IdempotencyLedger:
     """Durable set of processed payment event ids."""

     def check_and_record(self, db: Session, event_id: str, event_type: str) -> LedgerResult:
          """
          Record ``event_id`` if it has not been seen before.

          Returns LedgerResult(is_new=True) when the caller owns processing of
          this event, is_new=False when it must acknowledge and stop.

          Raises:
               LedgerUnavailable: the store could not be reached
          """
          try:
               entry = WebhookEvent(
                    event_id=event_id,
                    event_type=event_type,
                    status=WebhookEventStatus.RECEIVED,
               )
               try:
                    with db.begin_nested():
                         db.add(entry)
                         db.flush()
                    return LedgerResult(is_new=True, entry=entry)
               except IntegrityError:
                    logger.debug("Event %s already in ledger", event_id)

               if self._reclaim(db, event_id):
                    logger.info("Reclaimed event %s after an earlier transient failure", event_id)
                    entry = db.query(WebhookEvent).filter(WebhookEvent.event_id == event_id).one()
                    return LedgerResult(is_new=True, entry=entry)

               return LedgerResult(is_new=False)
          except (OperationalError, DBAPIError) as e:
               logger.error("Idempotency ledger unavailable for event %s: %s", event_id, e)
               raise LedgerUnavailable(str(e)) from e

     def _reclaim(self, db: Session, event_id: str) -> bool:
          result = db.execute(
               update(WebhookEvent)
               .where(
                    WebhookEvent.event_id == event_id,
                    WebhookEvent.status == WebhookEventStatus.RETRYABLE,
               )
               .values(
                    status=WebhookEventStatus.RECEIVED,
                    attempts=WebhookEvent.attempts + 1,
                    error=None,
               )
               .execution_options(synchronize_session=False)
          )
          return result.rowcount == 1

     def mark_processed(self, db: Session, event_id: str) -> None:
          db.execute(
               update(WebhookEvent)
               .where(WebhookEvent.event_id == event_id)
               .values(status=WebhookEventStatus.PROCESSED, processed_at=utcnow())
               .execution_options(synchronize_session=False)
          )

     def mark_failed(self, db: Session, event_id: str, error: str, retryable: bool) -> None:
          """Record failure detail; RETRYABLE lets the next delivery reclaim the event."""
          status = WebhookEventStatus.RETRYABLE if retryable else WebhookEventStatus.FAILED
          db.execute(
               update(WebhookEvent)
               .where(WebhookEvent.event_id == event_id)
               .values(status=status, error=error[:2000], failed_at=utcnow())
               .execution_options(synchronize_session=False)
          )
