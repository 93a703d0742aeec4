"""
Sentence Splitter for the Chunking Pipeline

Regex-based sentence boundary detection for English technical
documentation. Handles common abbreviations (e.g., i.e., Fig., Dr.) and
treats blank lines as hard boundaries so headings and list blocks from
cleaned markdown do not merge into one giant sentence.

Design:
- Split at sentence-ending punctuation (.!?) followed by whitespace
- Split at paragraph breaks (blank lines)
- Protect known abbreviations and decimal/version numbers from false splits
- No external dependencies (no spaCy, no NLTK)

Usage:
    from chunking.sentence_splitter import split_sentences

    sentences = split_sentences("This is one. This is two.")
    # ["This is one.", "This is two."]
"""

import re

# Placeholder character used to protect dots from sentence splitting.
_DOT_PLACEHOLDER = "\x00"

# Abbreviations that should NOT trigger sentence splits.
_ABBREVIATIONS = {
    # Titles
    "dr", "mr", "mrs", "ms", "prof", "sr", "jr", "st",
    # Documentation
    "fig", "figs", "eq", "eqs", "sec", "ch", "vol", "no", "pp", "ref", "refs",
    "approx", "incl", "max", "min", "vs", "etc", "cf", "al",
    # Months (abbreviated)
    "jan", "feb", "mar", "apr", "jun", "jul", "aug", "sep",
    "sept", "oct", "nov", "dec",
}

# Any known abbreviation followed by a dot and whitespace.
_ABBREV_PATTERN = re.compile(
    r"(?<!\w)(?:" + "|".join(re.escape(a) for a in sorted(_ABBREVIATIONS)) + r")\.(?=\s)",
    re.IGNORECASE,
)

# Multi-part abbreviations: e.g., i.e., U.S., a.k.a.
_MULTI_ABBREV_PATTERN = re.compile(r"\b[a-zA-Z]\.(?:[a-zA-Z]\.)+")

# Enumerations at the start of a line: "1. Install", "12. Run"
_ENUMERATION_PATTERN = re.compile(r"(?m)^(\s*\d{1,3})\.(?=\s)")

# Paragraph breaks are always boundaries.
_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")

_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")


def _protect_dots(text: str) -> str:
    """Replace dots in abbreviations and enumerations with placeholders."""
    # Order matters: multi-part abbreviations first (e.g. before "g.")
    text = _MULTI_ABBREV_PATTERN.sub(
        lambda m: m.group().replace(".", _DOT_PLACEHOLDER), text
    )
    text = _ABBREV_PATTERN.sub(
        lambda m: m.group().replace(".", _DOT_PLACEHOLDER), text
    )
    text = _ENUMERATION_PATTERN.sub(
        lambda m: m.group(1) + _DOT_PLACEHOLDER, text
    )
    return text


def _restore_dots(text: str) -> str:
    """Restore placeholder characters back to dots."""
    return text.replace(_DOT_PLACEHOLDER, ".")


def split_sentences(text: str) -> list[str]:
    """
    Split text into sentences at sentence and paragraph boundaries.

    Args:
        text: Input text to split into sentences.

    Returns:
        List of sentence strings. Empty/whitespace input returns empty list.
        Each sentence is stripped and has inner whitespace runs collapsed.
    """
    if not text or not text.strip():
        return []

    protected = _protect_dots(text.strip())

    sentences = []
    for paragraph in _PARAGRAPH_BREAK.split(protected):
        for part in _SENTENCE_BOUNDARY.split(paragraph):
            restored = " ".join(_restore_dots(part).split())
            if restored:
                sentences.append(restored)

    return sentences
