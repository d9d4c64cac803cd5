"""
Pydantic schemas for authentication endpoints.
"""
from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, EmailStr, Field, field_validator

from jobboard.core.principals import EntityKind
from jobboard.schemas.subscription import SubscriptionResponse


def _check_password(v: str) -> str:
    password_bytes = v.encode("utf-8")
    if len(password_bytes) > 72:
        raise ValueError("Password too long (bcrypt limit 72 bytes)")
    if len(password_bytes) < 8:
        raise ValueError("Password must be at least 8 characters")
    return v


class RegisterUserRequest(BaseModel):
    """Request schema for job seeker registration."""
    name: str = Field(..., min_length=1, max_length=200, description="Full name")
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=8, description="Password (min 8 characters)")
    skills: Optional[str] = Field(default=None, description="Comma-separated skills")
    bio: Optional[str] = Field(default=None, description="Short bio")
    location: Optional[str] = Field(default=None, description="City or region")

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        """Validate password length in bytes (bcrypt limit is 72 bytes)."""
        return _check_password(v)

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Jane Doe",
                "email": "jane.doe@example.com",
                "password": "SecurePass123",
                "skills": "python,sql",
                "location": "Bengaluru",
            }
        }


class RegisterCompanyRequest(BaseModel):
    """Request schema for employer registration."""
    name: str = Field(..., min_length=1, max_length=200, description="Company name")
    email: EmailStr = Field(..., description="Company contact email")
    password: str = Field(..., min_length=8, description="Password (min 8 characters)")
    website: Optional[str] = Field(default=None, description="Company website")
    about: Optional[str] = Field(default=None, description="About the company")
    industry: Optional[str] = Field(default=None, description="Industry")
    logo: Optional[str] = Field(default=None, description="Logo URL")

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        return _check_password(v)

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Acme Corp",
                "email": "hr@acme.example.com",
                "password": "SecurePass123",
                "website": "https://acme.example.com",
                "industry": "Software",
            }
        }


class LoginRequest(BaseModel):
    """Request schema for login."""
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., description="Password")
    entity_type: EntityKind = Field(..., description="Account kind: User or Company")

    class Config:
        json_schema_extra = {
            "example": {
                "email": "jane.doe@example.com",
                "password": "SecurePass123",
                "entity_type": "User",
            }
        }


class UserProfile(BaseModel):
    id: int
    email: str
    name: str
    skills: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        extra = "forbid"


class CompanyProfile(BaseModel):
    id: int
    email: str
    name: str
    website: Optional[str] = None
    about: Optional[str] = None
    industry: Optional[str] = None
    logo: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        extra = "forbid"


class EntityResponse(BaseModel):
    """The authenticated entity with its roles and subscription."""
    entity_type: EntityKind = Field(..., description="User or Company")
    roles: List[str] = Field(default_factory=list, description="Role names")
    profile: Union[UserProfile, CompanyProfile] = Field(..., description="Entity profile")
    subscription: Optional[SubscriptionResponse] = Field(None, description="Current subscription with its plan")


class AuthResponse(EntityResponse):
    """Response schema for registration and login."""
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
