# schemas/payment.py
"""
Pydantic schemas for the payment intent API.
"""
from decimal import Decimal
from pydantic import BaseModel, Field, ConfigDict


class CreateIntentRequest(BaseModel):
     """Request body for POST /api/payments/create-intent."""

     invoice_id: str = Field(..., min_length=1, max_length=64, alias="invoiceId")

     model_config = ConfigDict(
          populate_by_name=True,
          json_schema_extra={"example": {"invoiceId": "5f0c6b1e-1d43-4a43-9d0e-3b1f1b1a2c11"}},
     )


class CreateIntentResponse(BaseModel):
     """Client secret the browser uses to confirm the payment with the processor."""

     client_secret: str = Field(..., serialization_alias="clientSecret")
     amount: Decimal = Field(..., description="Amount due, in currency units")
