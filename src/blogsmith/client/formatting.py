from __future__ import annotations

from typing import List

_MARKERS = ("---", "###", "**")


def _strip_markers(content: str) -> str:
    # Removing one marker can join the halves of another ("-**--"), so repeat
    # until none remain.
    while any(marker in content for marker in _MARKERS):
        for marker in _MARKERS:
            content = content.replace(marker, "")
    return content


def format_content(content: str) -> str:
    """Strip markdown rules, headers and bold markers; one paragraph per line.

    Blank lines are dropped and the remaining lines are trimmed and joined with
    a blank line between them. Applying it twice gives the same result, so it
    can be re-run over the whole accumulated text on every update.
    """
    lines: List[str] = [line.strip() for line in _strip_markers(content).split("\n") if line.strip()]
    return "\n\n".join(lines)
