# models/invoice.py
import enum
from datetime import date
from decimal import Decimal
from sqlalchemy import Column, String, Text, Numeric, Date, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from .base import Base, new_id, utcnow


class InvoiceStatus(str, enum.Enum):
     """Enumeration for invoice payment status."""
     PENDING = "pending"
     PAID = "paid"
     OVERDUE = "overdue"
     CANCELLED = "cancelled"


class Invoice(Base):
     """
     Invoice model - billing records owned by a practice.

     Only the payment reconciler moves an invoice to PAID. OVERDUE is derived
     from the due date (see ``effective_status``) rather than trusted from the
     stored column.
     """
     __tablename__ = "invoices"

     id = Column(String(64), primary_key=True, default=new_id)

     # Foreign keys
     practice_id = Column(
          String(64),
          ForeignKey("practices.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )

     # Invoice details
     invoice_number = Column(String(50), nullable=False, unique=True)
     description = Column(Text, nullable=True)
     amount = Column(Numeric(12, 2), nullable=False)
     amount_paid = Column(Numeric(12, 2), default=Decimal("0.00"), nullable=False)
     due_date = Column(Date, nullable=True, index=True)
     paid_date = Column(DateTime(timezone=True), nullable=True)
     status = Column(
          Enum(
               InvoiceStatus,
               name="invoice_status",
               create_constraint=True,
               values_callable=lambda e: [m.value for m in e],
          ),
          default=InvoiceStatus.PENDING,
          nullable=False,
          index=True
     )

     # Timestamps
     created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
     updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

     # Relationships
     practice = relationship("Practice", back_populates="invoices")
     payments = relationship(
          "Payment",
          back_populates="invoice",
          order_by="Payment.created_at",
          cascade="all, delete-orphan"
     )

     def __repr__(self):
          return f"<Invoice(id={self.id}, number='{self.invoice_number}', status='{self.status.value}')>"

     @property
     def is_overdue(self) -> bool:
          """Check if invoice is past due date and unpaid."""
          if self.status in (InvoiceStatus.PAID, InvoiceStatus.CANCELLED):
               return False
          return self.due_date is not None and self.due_date < date.today()

     @property
     def effective_status(self) -> InvoiceStatus:
          """Stored status, with OVERDUE derived from the due date."""
          if self.is_overdue:
               return InvoiceStatus.OVERDUE
          if self.status == InvoiceStatus.OVERDUE:
               return InvoiceStatus.PENDING
          return self.status

     @property
     def balance_due(self) -> Decimal:
          return Decimal(self.amount or 0) - Decimal(self.amount_paid or 0)

     def apply_payment(self, amount: Decimal, paid_at) -> None:
          """
          Record a successful payment against this invoice.

          The invoice becomes PAID once nothing is left due; a partial payment
          leaves it open with the remaining balance.
          """
          self.amount_paid = Decimal(self.amount_paid or 0) + amount
          if self.balance_due <= 0:
               self.status = InvoiceStatus.PAID
               self.paid_date = paid_at
