from .invoice import (
     InvoiceStatusEnum,
     InvoiceResponse,
     InvoiceDetailResponse,
     InvoiceListResponse,
     PaymentSummary,
)
from .payment import CreateIntentRequest, CreateIntentResponse
from .notification import NotificationResponse, NotificationListResponse
from .payment_method import PaymentMethodActionRequest, PaymentMethodListResponse, PaymentMethodResponse

__all__ = [
     "InvoiceStatusEnum",
     "InvoiceResponse",
     "InvoiceDetailResponse",
     "InvoiceListResponse",
     "PaymentSummary",
     "CreateIntentRequest",
     "CreateIntentResponse",
     "NotificationResponse",
     "NotificationListResponse",
     "PaymentMethodActionRequest",
     "PaymentMethodListResponse",
     "PaymentMethodResponse",
]
