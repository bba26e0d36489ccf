from .invoice_service import InvoiceService
from .audit_service import AuditRecorder
from .idempotency_ledger import IdempotencyLedger, LedgerResult
from .reconciler import InvoiceReconciler, ReconciliationResult
from .notifier import PaymentNotifier
from .webhook_processor import WebhookProcessor

__all__ = [
     "InvoiceService",
     "AuditRecorder",
     "IdempotencyLedger",
     "LedgerResult",
     "InvoiceReconciler",
     "ReconciliationResult",
     "PaymentNotifier",
     "WebhookProcessor",
]
