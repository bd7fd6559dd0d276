"""
API v1 routes.

Defines REST endpoints called by the automation platform. The router is
mounted both at the root, where the existing Make scenario posts, and
under ``/v1``.
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from src.api.dependencies import get_registration_service
from src.api.models import (
    ErrorResponse,
    NotifyExistingSellerRequest,
    NotifyExistingSellerResponse,
)
from src.domain.exceptions import NotificationError
from src.domain.registration import RegistrationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["v1"])

DM_FAILED_MESSAGE = "Failed to send DM. The user may have DMs disabled or the bot has no access."


@router.post(
    "/notify-existing-seller",
    response_model=NotifyExistingSellerResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing or invalid fields"},
        500: {"model": ErrorResponse, "description": "Direct message could not be delivered"},
    },
    summary="DM an existing seller",
    description="Tell a user who filled in the full sales agreement that they already "
    "have a seller profile, with their seller id.",
)
async def notify_existing_seller(
    request_data: NotifyExistingSellerRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> NotifyExistingSellerResponse | JSONResponse:
    """
    Send the existing-seller direct message.

    - **discordId**: Discord user id to message
    - **sellerId**: Existing seller id
    - **orderId**: Optional order reference
    - **email**: Optional e-mail of the existing profile
    """
    try:
        await service.notify_existing_seller(
            request_data.discord_id,
            request_data.seller_id,
            email=str(request_data.email) if request_data.email else None,
            order_id=request_data.order_id,
        )
    except NotificationError as e:
        logger.warning("Existing-seller DM to %s failed: %s", request_data.discord_id, e)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error=DM_FAILED_MESSAGE).model_dump(),
        )
    return NotifyExistingSellerResponse(success=True)
