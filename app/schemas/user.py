"""
Pydantic models for User request validation.
"""

from typing import Optional
from pydantic import BaseModel, Field, field_validator


class UpdateProfileRequest(BaseModel):
    """Partial profile update. Omitted fields are left unchanged."""
    firstName: Optional[str] = Field(None, min_length=1, max_length=50)
    lastName: Optional[str] = Field(None, min_length=1, max_length=50)
    age: Optional[int] = Field(None, gt=0, le=150)
    phoneNumber: Optional[str] = Field(None, min_length=1, max_length=20)

    @field_validator("firstName", "lastName", "age", "phoneNumber", mode="before")
    @classmethod
    def reject_null(cls, v):
        """Fields may be omitted but not cleared with an explicit null."""
        if v is None:
            raise ValueError("must not be null")
        return v
