from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from jobboard.db.base import Base


class User(Base):
    """Job seeker account. Owns applications, bookmarks and one subscription."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    name = Column(String, nullable=False)
    skills = Column(Text, nullable=True)
    bio = Column(Text, nullable=True)
    location = Column(String, nullable=True)
    is_banned = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    subscription = relationship("UserSubscription", back_populates="user", uselist=False)
    roles = relationship("Role", secondary="user_roles", lazy="selectin")

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"
