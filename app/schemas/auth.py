"""
Pydantic models for Auth request validation.

Defines schemas for registration, verification, login and profile setup.
"""

from pydantic import BaseModel, Field, EmailStr


class EmailRequest(BaseModel):
    """Request body carrying only an email (register, resend, login step 1)."""
    email: EmailStr


class VerifyEmailRequest(BaseModel):
    """Request body for email verification."""
    email: EmailStr
    code: str = Field(..., pattern=r"^\d{6}$", description="6-digit code from the email")


class LoginRequest(BaseModel):
    """Request body for password login."""
    email: EmailStr
    password: str = Field(..., min_length=1)


class SaveProfileInfoRequest(BaseModel):
    """Request body for the registration profile step."""
    username: str = Field(..., min_length=3, max_length=30)
    firstName: str = Field(..., min_length=1, max_length=50)
    lastName: str = Field(..., min_length=1, max_length=50)


class SavePasswordRequest(BaseModel):
    """Request body for the registration password step."""
    password: str = Field(..., min_length=8, max_length=128)
