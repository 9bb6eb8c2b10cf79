"""Reply suggestion endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends

from smartreplies.api.schemas import ErrorResponse, GenerateReplyRequest, GenerateReplyResponse
from smartreplies.core.exceptions import ValidationError
from smartreplies.core.logging import get_logger
from smartreplies.services.generation import GenerationService, get_generation_service

logger = get_logger(__name__)
router = APIRouter(tags=["Replies"])


@router.post(
    "/generate-reply",
    response_model=GenerateReplyResponse,
    summary="Generate a reply suggestion",
    responses={
        400: {"model": ErrorResponse, "description": "Message missing"},
        500: {"model": ErrorResponse, "description": "Generation failed"},
    },
)
async def generate_reply(
    request: GenerateReplyRequest,
    generator: Annotated[GenerationService, Depends(get_generation_service)],
) -> GenerateReplyResponse:
    """
    Generate a suggested reply for an incoming message.

    - **message**: text to reply to (required)
    - **tone**: neutral, professional, casual, funny or empathetic
    - **length**: short, medium or long
    - **site**: hostname the message was read on
    """
    if not request.message or not request.message.strip():
        raise ValidationError("Message is required.")

    reply = await generator.generate_reply(
        request.message,
        tone=request.tone,
        length=request.length,
        site=request.site,
    )
    return GenerateReplyResponse(reply=reply)
