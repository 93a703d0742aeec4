"""
Template answers used when the generation model is disabled or fails.

The reply is assembled from the retrieved context only, so it is always
grounded and never empty as long as at least one result was retrieved.
"""

from __future__ import annotations

import re
from typing import Sequence

from retrieval.context import truncate_excerpt
from vector_store.models import RankedResult

MAX_RELEVANT_LINES = 3
TEMPLATE_PREFIX = "Based on the documentation:"

_HEADER_LINE = re.compile(r"^\[\d+\] \(\d+% match\)")
_WORD = re.compile(r"[a-z0-9]+")
_MIN_KEYWORD_LEN = 3


def query_keywords(query: str) -> set[str]:
    return {w for w in _WORD.findall(query.lower()) if len(w) >= _MIN_KEYWORD_LEN}


def relevant_lines(query: str, context: str, limit: int = MAX_RELEVANT_LINES) -> list[str]:
    """Context lines mentioning a query keyword, in context order."""
    keywords = query_keywords(query)
    if not keywords:
        return []

    lines = []
    for line in context.split("\n"):
        line = line.strip()
        if not line or line == "---" or _HEADER_LINE.match(line):
            continue
        lowered = line.lower()
        if any(kw in lowered for kw in keywords):
            lines.append(line)
            if len(lines) >= limit:
                break
    return lines


def template_answer(
    query: str,
    context: str,
    results: Sequence[RankedResult],
    excerpt_chars: int = 400,
) -> str:
    """
    Build a reply without a language model.

    Keyword-matching context lines are preferred; otherwise the top result
    is quoted verbatim (truncated to ``excerpt_chars``).
    """
    lines = relevant_lines(query, context)
    if lines:
        return TEMPLATE_PREFIX + "\n\n" + "\n\n".join(lines)

    if not results:
        return ""
    top = results[0]
    return (
        f"The most relevant passage I found is from {top.source.label}:\n\n"
        f"{truncate_excerpt(top.text, excerpt_chars)}"
    )
