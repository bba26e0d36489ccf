# services/invoice_service.py
"""
Invoice Service - tenant-scoped invoice reads.

Every query is filtered by the caller's practice id, taken from the
RequestContext the authorization gate resolved; invoices of other practices
behave exactly like invoices that do not exist.
"""
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from dependencies import RequestContext
from models import Invoice
from models.invoice import InvoiceStatus
from services.errors import InvoiceNotFound

_OPEN_STATUSES = (InvoiceStatus.PENDING, InvoiceStatus.OVERDUE)


class InvoiceService:
     """Service class for invoice-related business logic."""

     @staticmethod
     def _scoped(db: Session, ctx: RequestContext) -> Query:
          return db.query(Invoice).filter(Invoice.practice_id == ctx.practice_id)

     @staticmethod
     def _filter_status(query: Query, status: InvoiceStatus) -> Query:
          """Apply a status filter, treating OVERDUE as derived from the due date."""
          today = date.today()
          if status == InvoiceStatus.OVERDUE:
               return query.filter(
                    Invoice.status.in_(_OPEN_STATUSES),
                    Invoice.due_date.isnot(None),
                    Invoice.due_date < today,
               )
          if status == InvoiceStatus.PENDING:
               return query.filter(
                    Invoice.status.in_(_OPEN_STATUSES),
                    or_(Invoice.due_date.is_(None), Invoice.due_date >= today),
               )
          return query.filter(Invoice.status == status)

     @staticmethod
     def list_invoices(
          db: Session,
          ctx: RequestContext,
          status: Optional[InvoiceStatus] = None,
          page: int = 1,
          page_size: int = 50,
     ) -> Tuple[List[Invoice], int]:
          """
          List the caller's invoices, newest first.

          Args:
               db: SQLAlchemy database session
               ctx: resolved caller context
               status: optional filter (OVERDUE is derived)
               page: 1-based page number
               page_size: invoices per page

          Returns:
               (invoices on the requested page, total matching invoices)
          """
          query = InvoiceService._scoped(db, ctx)
          if status is not None:
               query = InvoiceService._filter_status(query, status)

          total = query.count()
          invoices = (
               query.order_by(Invoice.created_at.desc(), Invoice.invoice_number.desc())
               .offset((page - 1) * page_size)
               .limit(page_size)
               .all()
          )
          return invoices, total

     @staticmethod
     def get_invoice(db: Session, ctx: RequestContext, invoice_id: str) -> Invoice:
          """
          Fetch one of the caller's invoices.

          Raises:
               InvoiceNotFound: unknown id, or the invoice belongs to another practice
          """
          invoice = InvoiceService._scoped(db, ctx).filter(Invoice.id == invoice_id).first()
          if invoice is None:
               raise InvoiceNotFound()
          return invoice

     @staticmethod
     def calculate_balance(db: Session, ctx: RequestContext) -> dict:
          """
          Calculate the outstanding balance of the caller's practice.

          Returns:
               Dictionary with balance information
          """
          invoices = InvoiceService._scoped(db, ctx).filter(
               Invoice.status != InvoiceStatus.CANCELLED
          ).all()

          outstanding = [inv for inv in invoices if inv.status != InvoiceStatus.PAID]
          overdue = [inv for inv in outstanding if inv.is_overdue]
          paid = [inv for inv in invoices if inv.status == InvoiceStatus.PAID]

          return {
               "total_owed": str(sum((inv.balance_due for inv in outstanding), Decimal("0.00"))),
               "overdue_amount": str(sum((inv.balance_due for inv in overdue), Decimal("0.00"))),
               "paid_amount": str(sum((Decimal(inv.amount_paid or 0) for inv in paid), Decimal("0.00"))),
               "outstanding_count": len(outstanding),
               "overdue_count": len(overdue),
               "paid_count": len(paid),
          }
