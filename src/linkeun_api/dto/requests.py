"""Request DTOs for API endpoints."""

from pydantic import BaseModel, Field


class AnimalRequest(BaseModel):
    """Request DTO for creating or replacing an animal.

    The handler will convert this to a plain dict for the service layer.
    """

    name: str = Field(
        ...,
        description="Letters, spaces and hyphens only",
        min_length=2,
        max_length=100,
        pattern=r"^[a-zA-Z\s-]+$",
        examples=["Fluffy"],
    )
    species: str = Field(..., min_length=2, max_length=100, examples=["Cat"])
    age: int = Field(0, ge=0, le=200, examples=[3])
    description: str = Field("", max_length=1000, examples=["A friendly cat with white fur"])


class FlowerRequest(BaseModel):
    """Request DTO for creating or replacing a flower."""

    name: str = Field(..., min_length=2, max_length=100, examples=["Rose"])
    species: str = Field(..., min_length=2, max_length=100, examples=["Rosa"])
    color: str = Field(..., min_length=2, max_length=50, examples=["Red"])
    description: str = Field(
        "", max_length=1000, examples=["A beautiful red rose with thorny stems"]
    )
    seasonal: bool = Field(False, examples=[True])


class TokenRequest(BaseModel):
    """Request DTO for issuing a development token."""

    user_id: int = Field(1, ge=1)
    username: str = Field("testuser", min_length=1)
    role: str = Field("user", min_length=1)
    email: str = Field("test@example.com", min_length=3)
