"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Field aliases keep the camelCase body the automation platform sends.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class NotifyExistingSellerRequest(BaseModel):
    """Request model for the existing-seller direct message."""

    model_config = ConfigDict(populate_by_name=True)

    discord_id: str = Field(
        ..., alias="discordId", pattern=r"^\d{5,25}$", description="Discord user id (snowflake)"
    )
    seller_id: str = Field(..., alias="sellerId", min_length=1, description="Existing seller id")
    order_id: str | None = Field(None, alias="orderId", description="Order the message is about")
    email: EmailStr | None = Field(None, description="E-mail the seller profile is registered on")


class NotifyExistingSellerResponse(BaseModel):
    """Response model for a delivered notification."""

    success: bool


class HealthResponse(BaseModel):
    """Response model for the health check."""

    status: str
    discord: str
    active_sessions: int


class ErrorResponse(BaseModel):
    """Error body the automation platform already parses."""

    success: bool = False
    error: str
