# routers/invoices.py
"""
Invoice API routes.

Read-only for portal users: invoices are issued by the lab and only change
state through payment reconciliation. Every route is scoped to the caller's
practice.
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_session
from dependencies import RequestContext, get_request_context
from models import Invoice, PaymentStatus
from models.invoice import InvoiceStatus
from services.invoice_service import InvoiceService
from schemas.invoice import (
     InvoiceResponse,
     InvoiceDetailResponse,
     InvoiceListResponse,
     InvoiceStatusEnum,
     PaymentSummary,
)

router = APIRouter(prefix="/api/invoices", tags=["invoices"])


def _to_response(invoice: Invoice) -> InvoiceResponse:
     return InvoiceResponse(
          id=invoice.id,
          invoice_number=invoice.invoice_number,
          description=invoice.description,
          amount=invoice.amount,
          amount_paid=invoice.amount_paid,
          balance_due=invoice.balance_due,
          status=InvoiceStatusEnum(invoice.effective_status.value),
          due_date=invoice.due_date,
          paid_date=invoice.paid_date,
          created_at=invoice.created_at,
     )


@router.get(
     "",
     response_model=InvoiceListResponse,
     summary="List invoices"
)
def list_invoices(
     status_filter: Optional[InvoiceStatusEnum] = Query(None, alias="status", description="Filter by status"),
     page: int = Query(1, ge=1, description="Page number"),
     page_size: int = Query(50, ge=1, le=100, description="Items per page"),
     db: Session = Depends(get_session),
     ctx: RequestContext = Depends(get_request_context)
):
     """
     List the invoices of the caller's practice.

     - **status**: pending, paid, overdue or cancelled (overdue is derived from the due date)
     - **page** / **page_size**: pagination
     """
     status = InvoiceStatus(status_filter.value) if status_filter else None
     invoices, total = InvoiceService.list_invoices(db, ctx, status=status, page=page, page_size=page_size)

     return InvoiceListResponse(
          invoices=[_to_response(inv) for inv in invoices],
          total=total,
          page=page,
          page_size=page_size,
          summary=InvoiceService.calculate_balance(db, ctx),
     )


@router.get(
     "/{invoice_id}",
     response_model=InvoiceDetailResponse,
     summary="Get invoice by ID"
)
def get_invoice(
     invoice_id: str,
     db: Session = Depends(get_session),
     ctx: RequestContext = Depends(get_request_context)
):
     """Invoice detail with its payment attempts. 404 if it is not the caller's."""
     invoice = InvoiceService.get_invoice(db, ctx, invoice_id)

     payments = [
          PaymentSummary(
               id=p.id,
               amount=p.amount,
               status=p.status.value,
               stripe_payment_id=p.stripe_payment_id,
               payment_method=p.payment_method,
               error=(p.meta or {}).get("error") if p.status == PaymentStatus.FAILED else None,
               created_at=p.created_at,
          )
          for p in invoice.payments
     ]
     return InvoiceDetailResponse(**_to_response(invoice).model_dump(), payments=payments)
