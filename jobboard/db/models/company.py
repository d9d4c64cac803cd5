from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from jobboard.db.base import Base


class Company(Base):
    """Employer account. Owns job postings and one subscription."""
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    name = Column(String, nullable=False, index=True)
    website = Column(String, nullable=True)
    about = Column(Text, nullable=True)
    industry = Column(String, nullable=True)
    logo = Column(String, nullable=True)
    is_banned = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    subscription = relationship("CompanySubscription", back_populates="company", uselist=False)
    roles = relationship("Role", secondary="company_roles", lazy="selectin")
    jobs = relationship("Job", back_populates="company")

    def __repr__(self):
        return f"<Company(id={self.id}, name='{self.name}')>"
