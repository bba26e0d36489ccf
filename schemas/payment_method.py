"""
Pydantic schemas for the saved-card API.
"""
from typing import List, Literal, Optional
from pydantic import BaseModel, Field, ConfigDict


class PaymentMethodResponse(BaseModel):
     """A saved card; only display details, never card numbers."""
     id: str
     brand: Optional[str] = None
     last4: Optional[str] = None
     exp_month: Optional[int] = None
     exp_year: Optional[int] = None
     is_default: bool = False


class PaymentMethodListResponse(BaseModel):
     payment_methods: List[PaymentMethodResponse]
     default_payment_method_id: Optional[str] = None


class PaymentMethodActionRequest(BaseModel):
     """Request body for POST /api/payment-methods."""

     action: Literal["attach", "detach", "set_default"]
     payment_method_id: str = Field(..., min_length=1, max_length=255, alias="paymentMethodId")

     model_config = ConfigDict(
          populate_by_name=True,
          json_schema_extra={"example": {"action": "set_default", "paymentMethodId": "pm_1Q2w3E4r5T6y"}},
     )
