"""
Context Assembler - ranked results to a prompt-ready context block

Each result becomes a numbered, attributed block:

    [1] (87% match) [physical-ai] Sensors and Perception
    Depth cameras project a pattern of infrared light...

Blocks are joined by a visible ``---`` separator. Truncation is per chunk
only; the total is not re-checked, which is fine for the small K values
the services use.
"""

from __future__ import annotations

from typing import Sequence

from vector_store.models import RankedResult

DEFAULT_EXCERPT_CHARS = 400
TRUNCATION_MARKER = "..."
BLOCK_SEPARATOR = "\n\n---\n\n"


def confidence_percent(score: float) -> int:
    return round(score * 100)


def truncate_excerpt(text: str, limit: int = DEFAULT_EXCERPT_CHARS) -> str:
    """First ``limit`` characters of ``text``, marked when cut."""
    text = text.strip()
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + TRUNCATION_MARKER


def format_block(index: int, result: RankedResult, excerpt_chars: int = DEFAULT_EXCERPT_CHARS) -> str:
    header = f"[{index}] ({confidence_percent(result.score)}% match) {result.source.label}"
    return f"{header}\n{truncate_excerpt(result.text, excerpt_chars)}"


def assemble_context(
    results: Sequence[RankedResult],
    excerpt_chars: int = DEFAULT_EXCERPT_CHARS,
) -> str:
    """
    Format ranked results into one context string.

    Args:
        results: Ranked results, best first.
        excerpt_chars: Per-chunk excerpt limit.

    Returns:
        The context block; empty string for no results.
    """
    return BLOCK_SEPARATOR.join(
        format_block(i, result, excerpt_chars)
        for i, result in enumerate(results, start=1)
    )
