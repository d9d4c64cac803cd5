import enum
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Enum, CheckConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from jobboard.db.base import Base


class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"


class Payment(Base):
    """
    A payment funding exactly one user or company subscription.

    Created PENDING when the provider order is opened; moves to COMPLETED only
    after the provider signature has been verified.
    """
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    amount = Column(Float, nullable=False)
    currency = Column(String(3), nullable=False, default="INR")
    status = Column(Enum(PaymentStatus), nullable=False, default=PaymentStatus.PENDING)

    provider = Column(String, nullable=False)
    provider_order_id = Column(String, unique=True, index=True, nullable=False)
    provider_payment_id = Column(String, nullable=True)

    # Plan the order was opened for; verification only activates this plan
    plan_id = Column(Integer, ForeignKey("plans.id"), nullable=False, index=True)

    user_subscription_id = Column(Integer, ForeignKey("user_subscriptions.id", ondelete="CASCADE"), nullable=True, index=True)
    company_subscription_id = Column(Integer, ForeignKey("company_subscriptions.id", ondelete="CASCADE"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user_subscription = relationship("UserSubscription", back_populates="payments")
    company_subscription = relationship("CompanySubscription", back_populates="payments")
    plan = relationship("Plan")

    __table_args__ = (
        CheckConstraint(
            "(user_subscription_id IS NULL) <> (company_subscription_id IS NULL)",
            name="ck_payment_single_subscription",
        ),
    )

    @property
    def subscription(self):
        return self.user_subscription or self.company_subscription

    def __repr__(self):
        return f"<Payment(id={self.id}, order='{self.provider_order_id}', status='{self.status}')>"
