import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from app.models.chat import ChatRequest, ChatResponse
from app.routers.dependencies import get_llm, limiter
from app.services.llm import LLMClient
from app.services.onboarding import handle_turn, start_conversation

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/chat/start", response_model=ChatResponse, summary="Start an onboarding session")
@limiter.limit("30/minute")
async def start_endpoint(request: Request) -> ChatResponse:
    """Return the opening question together with a fresh session state."""
    reply, state = start_conversation()
    return ChatResponse(reply=reply, state=state)


@router.post("/chat", response_model=ChatResponse, summary="Send one onboarding message")
@limiter.limit("30/minute")
async def chat_endpoint(
    request: Request,
    body: ChatRequest,
    llm: LLMClient = Depends(get_llm),
) -> ChatResponse:
    """Process one user message.

    The returned ``state`` must be sent back with the next message; the
    server keeps nothing between turns.  Without a ``state`` a new session
    is started and the message is processed as its first turn.
    """
    state = body.state
    if state is None:
        _opener, state = start_conversation()
    logger.info("Chat turn received", extra={"session_id": state.session_id})

    try:
        reply, next_state = await handle_turn(body.message, state, llm)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return ChatResponse(reply=reply, state=next_state)
