"""Chat relay endpoint.

Forwards the user's message to the automation chatbot and returns its
reply. Conversation history lives on the automation side.
"""

from fastapi import APIRouter, Depends

from api.schemas.common import ChatRequest, ChatResponse, ErrorResponse
from app.dependencies import get_chat_service
from core.security import Actor, get_current_actor
from services.chat_service import ChatService

router = APIRouter()


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={401: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def send_message(
    request: ChatRequest,
    actor: Actor = Depends(get_current_actor),
    chat: ChatService = Depends(get_chat_service),
) -> ChatResponse:
    reply, via_fallback = await chat.send(request.message, actor)
    return ChatResponse(response=reply, viaFallback=via_fallback)
