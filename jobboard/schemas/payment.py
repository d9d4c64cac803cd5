"""
Pydantic schemas for payment endpoints.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from jobboard.db.models import PaymentStatus
from jobboard.schemas.common import Pagination
from jobboard.schemas.subscription import PlanResponse, SubscriptionResponse


class CreateOrderRequest(BaseModel):
    plan_id: int = Field(..., gt=0, description="Paid plan the order is for")


class OrderDetails(BaseModel):
    id: str = Field(..., description="Provider order id")
    status: str
    amount: float
    currency: str
    receipt: str


class CreateOrderResponse(BaseModel):
    order: OrderDetails
    payment_id: int = Field(..., description="Internal payment record id")
    plan: PlanResponse


class VerifyPaymentRequest(BaseModel):
    """Checkout result returned by the payment provider."""
    order_id: str = Field(..., min_length=1)
    payment_id: str = Field(..., min_length=1)
    signature: str = Field(..., min_length=1)

    class Config:
        json_schema_extra = {
            "example": {
                "order_id": "mock_order_1760000000000_1",
                "payment_id": "pay_123",
                "signature": "5f2b...",
            }
        }


class PaymentResponse(BaseModel):
    id: int
    amount: float
    currency: str
    status: PaymentStatus
    provider: str
    provider_order_id: str
    provider_payment_id: Optional[str] = None
    plan_id: int
    created_at: datetime

    class Config:
        from_attributes = True


class VerifyPaymentResponse(BaseModel):
    payment: PaymentResponse
    subscription: SubscriptionResponse
    activated: bool = Field(..., description="False when the payment had already been verified")


class PaymentHistoryResponse(BaseModel):
    payments: List[PaymentResponse]
    pagination: Pagination
