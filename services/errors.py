# services/errors.py
"""
Service-layer exceptions.

Each error knows the HTTP status it maps to, whether the caller (or the
payment processor, for webhooks) should retry, and a message that is safe to
show to clients. Internal detail goes to the logs only.
"""


class PortalError(Exception):
     """Base class for errors raised by the service layer."""

     status_code = 500
     retryable = False
     message = "An unexpected error occurred"

     def __init__(self, detail: str = ""):
          super().__init__(detail or self.message)
          self.detail = detail or self.message


class MissingSignatureHeader(PortalError):
     status_code = 400
     message = "Missing stripe-signature header"


class InvalidSignature(PortalError):
     status_code = 401
     message = "Invalid signature"


class WebhookNotConfigured(PortalError):
     status_code = 500
     message = "Server configuration error"


class LedgerUnavailable(PortalError):
     status_code = 500
     retryable = True
     message = "Temporary failure, please retry"


class InvoiceNotFound(PortalError):
     status_code = 404
     message = "Invoice not found"


class InvoiceNotPayable(PortalError):
     status_code = 400
     message = "Invoice cannot be paid"


class NotificationNotFound(PortalError):
     status_code = 404
     message = "Notification not found"


class PracticeNotLinked(PortalError):
     status_code = 403
     message = "User profile not found"


class PaymentProviderError(PortalError):
     status_code = 502
     message = "Failed to create payment intent"

     def __init__(self, detail: str = "", retryable: bool = False):
          super().__init__(detail)
          self.retryable = retryable


class ReconciliationPartialFailure(PortalError):
     """
     The financial write committed but a follow-up side effect (notification
     or audit entry) did not. Logged only; never surfaced to the sender.
     """
     message = "Reconciliation side effect failed"


class TransientProcessingError(PortalError):
     """A payment event could not be applied for a reason worth retrying."""
     status_code = 500
     retryable = True
     message = "Temporary failure, please retry"


class PaymentMethodNotFound(PortalError):
     status_code = 404
     message = "Payment method not found"


class PaymentMethodRequestFailed(PaymentProviderError):
     message = "Payment method request failed"
