"""Recommendation Format: prompt construction and block parsing for LLM book recommendations.

Invariants:
    - 1..max_titles non-blank seed titles, else RequestValidationFailed
    - Response contract: blocks separated by a blank line, each with
      "Title: ...", "Author: ...", "Description: ..." on its first three lines
    - Any malformed block fails the whole parse (RecommendationParseError)
    - Empty model output parses to an empty list

Design Decisions:
    - Field value is everything after the first ": " so descriptions may contain colons
    - Line labels are not checked; position defines the field
"""

import re
from dataclasses import dataclass

from bookcircle.core.errors import RecommendationParseError, RequestValidationFailed

RECOMMENDATION_COUNT = 3
_BLOCK_SEPARATOR = re.compile(r"\n\s*\n")
_FIELD_SEPARATOR = ": "


@dataclass(frozen=True)
class Recommendation:
    title: str
    author: str
    description: str


def normalize_seed_titles(titles: list[str] | None, max_titles: int) -> list[str]:
    """Strip titles, drop blanks, and enforce 1..max_titles."""
    cleaned = [t.strip() for t in (titles or []) if t and t.strip()]
    if not cleaned:
        raise RequestValidationFailed(
            "At least one book title is required for recommendations", "titles",
        )
    if len(cleaned) > max_titles:
        raise RequestValidationFailed(
            f"At most {max_titles} book titles are allowed", "titles",
        )
    return cleaned


def build_recommendation_prompt(titles: list[str]) -> str:
    joined = ", ".join(titles)
    return (
        f"Recommend {RECOMMENDATION_COUNT} different books based on the following "
        f"book titles that don't have the same title:\n{joined}\n\n"
        "Have the format of your response be Title: Book title newline "
        "Author: Book Author newline Description: Book Description, "
        "with a blank line between books and no other text."
    )


def _field_value(line: str | None) -> str:
    if not line or _FIELD_SEPARATOR not in line:
        return ""
    return line.split(_FIELD_SEPARATOR, 1)[1].strip()


def parse_recommendations(raw: str | None) -> list[Recommendation]:
    """Parse the model's block-structured reply."""
    if not raw or not raw.strip():
        return []
    blocks = [b.strip() for b in _BLOCK_SEPARATOR.split(raw.strip()) if b.strip()]
    recs = []
    for index, block in enumerate(blocks):
        lines = [line.strip() for line in block.splitlines()]
        title, author, description = (
            _field_value(lines[i] if i < len(lines) else None) for i in range(3)
        )
        if not (title and author and description):
            raise RecommendationParseError(index)
        recs.append(Recommendation(title, author, description))
    return recs
