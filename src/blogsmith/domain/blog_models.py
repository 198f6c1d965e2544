from __future__ import annotations

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field


class Perspective(str, Enum):
    SOFTWARE_ENGINEER = "software-engineer"
    STUDENT = "student"
    TEACHER = "teacher"
    BUSINESS_PROFESSIONAL = "business-professional"
    CASUAL_BLOGGER = "casual-blogger"


DEFAULT_PERSPECTIVE = Perspective.CASUAL_BLOGGER

# Labels shown by the UI selector, in display order.
PERSPECTIVE_LABELS = {
    Perspective.SOFTWARE_ENGINEER: "Software Engineer",
    Perspective.STUDENT: "Student",
    Perspective.TEACHER: "Teacher",
    Perspective.BUSINESS_PROFESSIONAL: "Business Professional",
    Perspective.CASUAL_BLOGGER: "Casual Blogger",
}


class GenerationRequest(BaseModel):
    title: Optional[str] = None
    keywords: Optional[List[str]] = None
    # Kept as a raw string: the server resolves it against Perspective itself
    perspective: Optional[str] = Field(default=None, description="One of the Perspective values")


class ErrorResponse(BaseModel):
    error: str


# Declared for API consumers; nothing in the service stores posts.
class BlogPost(BaseModel):
    id: str
    title: str
    content: str
    keywords: List[str] = Field(default_factory=list)
    created_at: str
    updated_at: str


class GenerateBlogResponse(BaseModel):
    content: str
