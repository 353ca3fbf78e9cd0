"""
API models and schemas for the FastAPI application.
"""

from typing import Optional

from pydantic import BaseModel, Field, validator


class BookCreate(BaseModel):
    """Payload accepted when creating a book."""
    name: str = Field(..., min_length=1, description="Book title")

    @validator('name')
    def validate_name(cls, v):
        """Reject titles made only of whitespace."""
        if not v.strip():
            raise ValueError('name must not be blank')
        return v


class Book(BaseModel):
    """Stored book record."""
    id: str = Field(..., min_length=1, description="Unique book identifier")
    name: str = Field(..., min_length=1, description="Book title")
    user: Optional[str] = Field(None, description="Subject of the owning user")

    model_config = {"frozen": True}

    def is_owned_by(self, subject: str) -> bool:
        """Check whether the book belongs to the given subject."""
        return self.user is not None and self.user == subject


class BookDeleteResponse(BaseModel):
    """Response returned after a book is deleted."""
    id: str = Field(..., description="Identifier of the deleted book")
    deleted: bool = Field(True, description="Whether the book was removed")


class TokenResponse(BaseModel):
    """Access token issued by the test login helper."""
    access_token: str = Field(..., description="Signed bearer token")
    token_type: str = Field("bearer", description="Token type for the Authorization header")
    expires_in: int = Field(..., description="Token lifetime in seconds")


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details")
    status_code: int = Field(..., description="HTTP status code")
