from typing import Optional

from pydantic import BaseModel, Field, field_validator

from app.models.conversation import ConversationState


class ChatRequest(BaseModel):
    message: str = Field(min_length=1)
    state: Optional[ConversationState] = None
    """State returned by the previous turn; omit to start a new session."""

    @field_validator("message")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("message must not be blank")
        return value


class ChatResponse(BaseModel):
    reply: str
    state: ConversationState
