from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class Source(str, Enum):
    WEBSITE = "website"
    CONVERSATION = "conversation"


class Message(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class KnowledgeField(BaseModel):
    """One extracted value for one profile field.

    Produced by a single extractor call and consumed straight away by the
    merge step.  ``confidence`` is deliberately unconstrained here; the merge
    clamps it into [0, 1].
    """

    name: str
    value: Any
    confidence: Any = 0.5
    needs_confirmation: bool = False
    source: Source = Source.CONVERSATION


class BusinessProfile(BaseModel):
    """Accumulated, canonical view of the business being onboarded."""

    fields: Dict[str, Any] = Field(default_factory=dict)
    confidence: Dict[str, float] = Field(default_factory=dict)
    sources: Dict[str, Source] = Field(default_factory=dict)
    needs_confirmation: List[str] = Field(default_factory=list)
    last_updated: Optional[datetime] = None
