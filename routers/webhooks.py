# routers/webhooks.py
"""
Payment processor webhook.

The raw body is handed to the processor untouched; signature verification
needs the exact bytes that were signed.
"""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from dependencies import get_webhook_processor
from services.errors import PortalError
from services.signature_verifier import SIGNATURE_HEADER
from services.webhook_processor import WebhookProcessor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post("/payments")
@router.post("/stripe", include_in_schema=False)
async def payment_webhook(
     request: Request,
     processor: WebhookProcessor = Depends(get_webhook_processor),
):
     """
     Receives payment processor events.

     200 on success, duplicates and permanent failures (so the processor stops
     retrying); 400/401 for missing/invalid signatures; 500 only when a retry
     could succeed.
     """
     payload = await request.body()
     signature = request.headers.get(SIGNATURE_HEADER)

     try:
          body = await run_in_threadpool(processor.process, payload, signature)
     except PortalError as e:
          if e.status_code >= 500:
               logger.error("Webhook delivery failed: %s", e.detail)
          else:
               logger.warning("Webhook rejected: %s", e.detail)
          return JSONResponse(status_code=e.status_code, content={"error": e.message})

     return body
