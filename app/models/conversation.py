from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from app.models.guidance import SchedulerState
from app.models.knowledge import BusinessProfile, Message
from app.models.page import ImageRef


class ConversationState(BaseModel):
    """Everything one onboarding session carries from turn to turn.

    The caller stores this after every turn and sends it back with the next
    message; nothing about a session is kept in process memory.
    """

    session_id: str = Field(default_factory=lambda: uuid4().hex)
    profile: BusinessProfile = Field(default_factory=BusinessProfile)
    scheduler: SchedulerState
    transcript: List[Message] = Field(default_factory=list)
    corpus: str = ""
    website_url: Optional[str] = None  # set once a crawl has been attempted
    images: List[ImageRef] = Field(default_factory=list)
