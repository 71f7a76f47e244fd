from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field

Category = Literal["business", "service", "client", "workflow", "preferences"]


class GuidanceRule(BaseModel):
    """One onboarding topic: the fields it needs and how to ask for them."""

    model_config = ConfigDict(frozen=True)

    id: str
    priority: int  # ascending = asked earlier
    category: Category
    required_info: List[str]
    prompt_template: str
    follow_up_questions: List[str] = Field(default_factory=list)


class SchedulerState(BaseModel):
    """Serializable cursor over the guidance rules.

    ``missing_info`` is derived: it always equals the current rule's
    ``required_info`` minus the fields present in the profile.
    """

    rules: List[GuidanceRule]
    current_priority: int
    missing_info: List[str] = Field(default_factory=list)
    completed: bool = False
