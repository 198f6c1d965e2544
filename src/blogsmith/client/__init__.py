from .controller import (
    CANCELLED_MESSAGE,
    FAILED_MESSAGE,
    BlogGenerationController,
    CancellationToken,
    GenerationState,
    can_submit,
    normalize_perspective,
    parse_keywords,
)
from .formatting import format_content

__all__ = [
    "CANCELLED_MESSAGE",
    "FAILED_MESSAGE",
    "BlogGenerationController",
    "CancellationToken",
    "GenerationState",
    "can_submit",
    "format_content",
    "normalize_perspective",
    "parse_keywords",
]
