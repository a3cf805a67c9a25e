"""
Request and response schemas for the `/books` endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field

from bookstore.models.book import NAME_MAX_LENGTH


class BookPayload(BaseModel):
    """
    Body of POST /books and PUT /books/{id}.

    All four fields are required and strictly typed: numeric strings and
    booleans are rejected and `price` must be finite. An `id` sent by the
    client is ignored; ids come from the database on create and from the path
    on update.
    """
    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., strict=True, min_length=1, max_length=NAME_MAX_LENGTH, description="Book title, unique")
    price: float = Field(..., strict=True, allow_inf_nan=False, ge=0, description="Price, non-negative")
    genre: int = Field(..., strict=True, ge=1, le=3, description="Genre code: 1, 2 or 3")
    amount: int = Field(..., strict=True, ge=0, description="Copies in stock")


class BookRead(BaseModel):
    """A stored book as returned by the API."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    price: float
    genre: int
    amount: int


class BookCreated(BaseModel):
    """Response of POST /books."""
    id: int


class ErrorResponse(BaseModel):
    """Body of every error response."""
    error: str
