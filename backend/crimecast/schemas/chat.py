"""Pydantic schemas for the chat assistant."""

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """Question asked by a dashboard user."""

    question: str = Field(..., min_length=1, max_length=2000)


class ChatResponse(BaseModel):
    """Assistant answer."""

    answer: str
