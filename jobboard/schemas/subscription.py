"""
Pydantic schemas for plans, subscriptions and usage.
"""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from jobboard.db.models import PaymentStatus, PlanType, SubscriptionStatus


class PlanResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    type: PlanType
    price: float
    duration: int = Field(..., description="Duration in days")
    user_applications_limit: int
    company_jobs_limit: int
    company_internships_limit: int

    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "id": 1,
                "name": "Free Plan",
                "description": "Get started with the basics",
                "type": "FREE",
                "price": 0,
                "duration": 30,
                "user_applications_limit": 5,
                "company_jobs_limit": 1,
                "company_internships_limit": 2,
            }
        }


class PlanListResponse(BaseModel):
    plans: List[PlanResponse]


class SubscriptionCreate(BaseModel):
    plan_id: int = Field(..., gt=0, description="Plan to subscribe to")


class LatestPayment(BaseModel):
    id: int
    amount: float
    currency: str
    status: PaymentStatus
    created_at: datetime

    class Config:
        from_attributes = True


class SubscriptionResponse(BaseModel):
    """Subscription with its plan. Counters present depend on the owner kind."""
    id: int
    plan: PlanResponse
    status: SubscriptionStatus
    start_date: datetime
    end_date: Optional[datetime] = None
    applications_used: Optional[int] = None
    jobs_posted: Optional[int] = None
    internships_posted: Optional[int] = None

    class Config:
        from_attributes = True


class CurrentSubscriptionResponse(BaseModel):
    subscription: Optional[SubscriptionResponse] = None
    latest_payment: Optional[LatestPayment] = None
    requires_payment: bool = Field(False, description="True while a paid plan awaits payment")


class ResourceUsage(BaseModel):
    used: int
    limit: int
    remaining: Optional[int] = Field(None, description="None for unlimited")
    unlimited: bool


class UsageResponse(BaseModel):
    """Response schema for GET /subscriptions/usage."""
    plan: str = Field(..., description="Plan name")
    status: SubscriptionStatus
    resources: Dict[str, ResourceUsage] = Field(..., description="Per-resource usage keyed by resource kind")

    class Config:
        json_schema_extra = {
            "example": {
                "plan": "Free Plan",
                "status": "ACTIVE",
                "resources": {
                    "application": {"used": 2, "limit": 5, "remaining": 3, "unlimited": False}
                },
            }
        }
