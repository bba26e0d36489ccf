# models/__init__.py
from .base import Base
from .practice import Practice
from .user import User, UserRole
from .invoice import Invoice, InvoiceStatus
from .payment import Payment, PaymentStatus
from .notification import Notification
from .audit_log import AuditLog
from .webhook_event import WebhookEvent, WebhookEventStatus

__all__ = [
     "Base",
     "Practice",
     "User",
     "UserRole",
     "Invoice",
     "InvoiceStatus",
     "Payment",
     "PaymentStatus",
     "Notification",
     "AuditLog",
     "WebhookEvent",
     "WebhookEventStatus",
]
