# models/webhook_event.py
"""
WebhookEvent model - idempotency ledger for payment processor events.

One row per provider event id, inserted before any side effect. The unique
constraint on ``event_id`` is what makes check-and-record atomic across
concurrent deliveries. Rows are never deleted; only the outcome columns change.
"""
import enum
from sqlalchemy import Column, Integer, String, Text, DateTime, Enum, UniqueConstraint
from .base import Base, utcnow


class WebhookEventStatus(str, enum.Enum):
     RECEIVED = "received"      # recorded, processing in progress
     PROCESSED = "processed"
     FAILED = "failed"          # permanent failure, will not be retried
     RETRYABLE = "retryable"    # transient failure, next delivery may reclaim it


class WebhookEvent(Base):
     __tablename__ = "webhook_events"
     __table_args__ = (
          UniqueConstraint("event_id", name="uq_webhook_events_event_id"),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)
     event_id = Column(String(255), nullable=False)
     event_type = Column(String(100), nullable=False)
     status = Column(
          Enum(WebhookEventStatus, name="webhook_event_status", values_callable=lambda e: [m.value for m in e]),
          default=WebhookEventStatus.RECEIVED,
          nullable=False
     )
     error = Column(Text, nullable=True)
     attempts = Column(Integer, default=1, nullable=False)
     received_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
     processed_at = Column(DateTime(timezone=True), nullable=True)
     failed_at = Column(DateTime(timezone=True), nullable=True)

     def __repr__(self):
          return f"<WebhookEvent(event_id='{self.event_id}', type='{self.event_type}', status='{self.status.value}')>"
