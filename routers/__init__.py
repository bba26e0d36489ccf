# routers/__init__.py
from .invoices import router as invoices_router
from .payments import router as payments_router
from .notifications import router as notifications_router
from .webhooks import router as webhooks_router
from .payment_methods import router as payment_methods_router

__all__ = [
     "invoices_router",
     "payments_router",
     "notifications_router",
     "webhooks_router",
     "payment_methods_router",
]
