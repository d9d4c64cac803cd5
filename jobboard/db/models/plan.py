"""
Plan model: immutable reference data for subscription pricing and limits.
"""
import enum
from sqlalchemy import Column, Integer, String, Text, Float, Enum
from jobboard.db.base import Base


class PlanType(str, enum.Enum):
    FREE = "FREE"
    PREMIUM = "PREMIUM"


class Plan(Base):
    __tablename__ = "plans"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    description = Column(Text, nullable=True)
    type = Column(Enum(PlanType), nullable=False, default=PlanType.FREE)

    price = Column(Float, nullable=False, default=0)
    duration = Column(Integer, nullable=False, default=30)  # days

    # 999999 = unlimited (see jobboard.core.plan_limits.UNLIMITED)
    user_applications_limit = Column(Integer, nullable=False, default=0)
    company_jobs_limit = Column(Integer, nullable=False, default=0)
    company_internships_limit = Column(Integer, nullable=False, default=0)

    @property
    def is_free(self) -> bool:
        return not self.price

    def __repr__(self):
        return f"<Plan(id={self.id}, name='{self.name}', price={self.price})>"
