"""API route for the crime data chat assistant."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from crimecast.dependencies import get_chat_assistant
from crimecast.limiter import ORACLE_RATE_LIMIT, limiter
from crimecast.schemas.chat import ChatRequest, ChatResponse
from crimecast.services.chat import ChatAssistant

router = APIRouter(tags=["chat"])


@router.post("/chat", response_model=ChatResponse)
@limiter.limit(ORACLE_RATE_LIMIT)
async def chat(
    request: Request,
    body: ChatRequest,
    assistant: Annotated[ChatAssistant, Depends(get_chat_assistant)],
) -> ChatResponse:
    """Answer a free-text question about the incident data."""
    answer = await assistant.ask(body.question)
    return ChatResponse(answer=answer)
