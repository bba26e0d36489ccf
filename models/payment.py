# models/payment.py
"""
Payment model - one row per applied payment event.

Rows are written by the payment reconciler only and never updated afterwards.
At most one COMPLETED row exists per ``stripe_payment_id``; that is enforced by
the webhook idempotency ledger plus a lookup in the reconciler.
"""
import enum
from decimal import Decimal
from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey, Enum, JSON
from sqlalchemy.orm import relationship
from .base import Base, new_id, utcnow


class PaymentStatus(str, enum.Enum):
     COMPLETED = "completed"
     FAILED = "failed"


class Payment(Base):
     __tablename__ = "payments"

     id = Column(String(64), primary_key=True, default=new_id)
     invoice_id = Column(
          String(64),
          ForeignKey("invoices.id", ondelete="RESTRICT"),  # Prevent delete if payments exist
          nullable=False,
          index=True
     )
     amount = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
     stripe_payment_id = Column(String(255), nullable=False, index=True)
     status = Column(
          Enum(PaymentStatus, name="payment_status", values_callable=lambda e: [m.value for m in e]),
          nullable=False
     )
     payment_method = Column(String(50), nullable=True)
     meta = Column("metadata", JSON, nullable=True)
     created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

     # Relationships
     invoice = relationship("Invoice", back_populates="payments")

     def __repr__(self):
          return f"<Payment(id={self.id}, invoice_id={self.invoice_id}, status='{self.status.value}')>"
