import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.application.errors import UpstreamChatFailure
from app.infrastructure.assistant.chat_relay import CHAT_ERROR_MESSAGE, MESSAGE_REQUIRED_ERROR, ChatRelay
from app.presentation.dependencies import get_chat_relay
from app.presentation.schemas.chat_schema import ChatRequest, ChatResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Assistant"])


@router.post("/chat", response_model=ChatResponse)
def chat(payload: ChatRequest, relay: ChatRelay = Depends(get_chat_relay)):
    if not payload.message or not payload.message.strip():
        logger.warning("Chat request without a message")
        return JSONResponse(status_code=400, content={"error": MESSAGE_REQUIRED_ERROR})

    try:
        return ChatResponse(message=relay.reply(payload.message, payload.context))
    except UpstreamChatFailure as e:
        logger.error(f"Chat relay failed: {e}")
        return JSONResponse(status_code=500, content={"error": CHAT_ERROR_MESSAGE})
