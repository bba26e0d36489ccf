# schemas/invoice.py
"""
Pydantic schemas for Invoice API responses.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, ConfigDict
from enum import Enum


class InvoiceStatusEnum(str, Enum):
     """Invoice payment status options."""
     PENDING = "pending"
     PAID = "paid"
     OVERDUE = "overdue"
     CANCELLED = "cancelled"


class PaymentSummary(BaseModel):
     """Payment row as shown on the invoice detail page."""
     id: str
     amount: Decimal
     status: str
     stripe_payment_id: str
     payment_method: Optional[str] = None
     error: Optional[str] = None
     created_at: datetime


class InvoiceResponse(BaseModel):
     """Schema for invoice response."""
     id: str
     invoice_number: str
     description: Optional[str] = None
     amount: Decimal
     amount_paid: Decimal
     balance_due: Decimal
     status: InvoiceStatusEnum
     due_date: Optional[date] = None
     paid_date: Optional[datetime] = None
     created_at: datetime

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "id": "5f0c6b1e-1d43-4a43-9d0e-3b1f1b1a2c11",
                    "invoice_number": "INV-2026-0042",
                    "description": "Crown & bridge, case 1183",
                    "amount": 850.00,
                    "amount_paid": 0.00,
                    "balance_due": 850.00,
                    "status": "pending",
                    "due_date": "2026-11-15",
                    "paid_date": None,
                    "created_at": "2026-10-16T10:30:00Z"
               }
          }
     )


class InvoiceDetailResponse(InvoiceResponse):
     """Invoice with its payment history."""
     payments: List[PaymentSummary] = []


class InvoiceListResponse(BaseModel):
     """Schema for paginated invoice list response."""
     invoices: List[InvoiceResponse]
     total: int
     page: int = 1
     page_size: int = 50
     summary: Dict[str, Any] = {}
