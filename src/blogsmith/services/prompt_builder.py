"""Static prompt template for blog post generation.

Title and keywords are concatenated into the instruction verbatim. No
sanitization against prompt injection is attempted.
"""

from __future__ import annotations

from typing import Dict, Optional, Sequence, Union

from ..domain.blog_models import DEFAULT_PERSPECTIVE, Perspective

BASE_INSTRUCTION = "Write a detailed blog post in approximately 500 words"
WORD_LIMIT_REMINDER = " Keep the content concise and focused within the 500-word limit."

PERSPECTIVE_INSTRUCTIONS: Dict[Perspective, str] = {
    Perspective.SOFTWARE_ENGINEER: (
        "Write from the perspective of an experienced software engineer, "
        "using technical terminology and practical development insights."
    ),
    Perspective.STUDENT: (
        "Write from a student's perspective, focusing on learning experiences "
        "and relatable explanations."
    ),
    Perspective.TEACHER: "Write as an educator, emphasizing clear explanations and educational value.",
    Perspective.BUSINESS_PROFESSIONAL: (
        "Write from a business professional's viewpoint, focusing on practical "
        "applications and business value."
    ),
    Perspective.CASUAL_BLOGGER: (
        "Write in a casual, conversational tone, making the content accessible "
        "to a general audience."
    ),
}


def resolve_perspective(value: Union[Perspective, str, None]) -> Perspective:
    """Map a request value onto the closed Perspective set.

    ``None`` and the empty string select the default. Anything else must be
    one of the known keys; a miss raises ``ValueError``.
    """
    if isinstance(value, Perspective):
        return value
    if not value:
        return DEFAULT_PERSPECTIVE
    return Perspective(value)


def build_prompt(
    title: Optional[str] = None,
    keywords: Optional[Sequence[str]] = None,
    perspective: Union[Perspective, str, None] = None,
) -> str:
    prompt = BASE_INSTRUCTION
    if title:
        prompt += f" about {title}"
    if keywords:
        prompt += f" covering the following topics: {', '.join(keywords)}"
    prompt += f". {PERSPECTIVE_INSTRUCTIONS[resolve_perspective(perspective)]}"
    prompt += WORD_LIMIT_REMINDER
    return prompt
