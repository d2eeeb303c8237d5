from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from sellsight.schemas.base import CamelModel

IdeaCategory = Literal[
    "New Feature",
    "Feature Enhancement",
    "UI/UX Improvement",
    "Performance",
    "Integration",
    "Research",
]
IdeaPriority = Literal["low", "medium", "high"]
IdeaStatus = Literal["new", "in-progress", "completed", "archived"]


class Idea(CamelModel):
    """A brainstorming note."""
    id: str
    title: str
    description: str = ""
    category: IdeaCategory
    priority: IdeaPriority = "medium"
    status: IdeaStatus = "new"
    created_at: datetime
    tags: List[str] = []


class IdeaCreate(CamelModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    category: IdeaCategory
    priority: IdeaPriority = "medium"
    tags: List[str] = []


class IdeaUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    category: Optional[IdeaCategory] = None
    priority: Optional[IdeaPriority] = None
    status: Optional[IdeaStatus] = None
    tags: Optional[List[str]] = None


class IdeaStatusUpdate(CamelModel):
    status: IdeaStatus


class IdeaTemplate(CamelModel):
    """A canned idea offered by the generation board."""
    title: str
    description: str
    category: IdeaCategory
    tags: List[str]
    inspiration: str


class IdeaPrompt(CamelModel):
    id: str
    label: str
    description: str


class GenerateIdeasRequest(CamelModel):
    prompts: List[str] = Field(..., min_length=1)


class GenerateIdeasResponse(CamelModel):
    ideas: List[IdeaTemplate]
