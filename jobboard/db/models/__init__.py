"""
Database models module.

This module imports all database models to ensure they are registered with SQLAlchemy's Base.metadata
before table creation.
"""
from jobboard.db.models.user import User
from jobboard.db.models.company import Company
from jobboard.db.models.role import Role, UserRole, CompanyRole
from jobboard.db.models.plan import Plan, PlanType
from jobboard.db.models.subscription import (
    SubscriptionStatus,
    UserSubscription,
    CompanySubscription,
)
from jobboard.db.models.payment import Payment, PaymentStatus
from jobboard.db.models.job import Job, JobType
from jobboard.db.models.application import JobApplication, ApplicationStatus, FINAL_STATUSES
from jobboard.db.models.bookmark import Bookmark

__all__ = [
    "User",
    "Company",
    "Role",
    "UserRole",
    "CompanyRole",
    "Plan",
    "PlanType",
    "SubscriptionStatus",
    "UserSubscription",
    "CompanySubscription",
    "Payment",
    "PaymentStatus",
    "Job",
    "JobType",
    "JobApplication",
    "ApplicationStatus",
    "FINAL_STATUSES",
    "Bookmark",
]
