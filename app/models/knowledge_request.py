from typing import List, Optional

from pydantic import BaseModel, Field

from app.models.knowledge import BusinessProfile, Message


class KnowledgeRequest(BaseModel):
    corpus: str = Field(default="", description="Website text, e.g. the corpus returned by /crawl.")
    transcript: List[Message] = Field(default_factory=list)
    profile: Optional[BusinessProfile] = Field(
        default=None,
        description="Profile to merge into; an empty profile is used when omitted.",
    )
    fields: Optional[List[str]] = Field(
        default=None,
        description="Restrict extraction to these field names (default: all).",
    )


class KnowledgeResponse(BaseModel):
    profile: BusinessProfile
    extracted: List[str]
