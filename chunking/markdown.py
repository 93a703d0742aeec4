"""
Markdown discovery and cleaning for the chunking pipeline.

Turns documentation sources (.md / .mdx) into plain text plus a
SourceRef. Cleaning is a pre-processing contract only: front matter,
HTML comments, heading markers, code fences, inline code and link syntax
are stripped; code inside fences is kept as text.
"""

import re
from pathlib import Path
from typing import Union

from .models import SourceRef

MARKDOWN_SUFFIXES = (".md", ".mdx")

_FRONT_MATTER = re.compile(r"\A---\s*\n.*?\n---\s*(?:\n|\Z)", re.DOTALL)
_HTML_COMMENT = re.compile(r"<!--.*?-->", re.DOTALL)
_HEADING_MARKER = re.compile(r"(?m)^[ \t]{0,3}#{1,6}[ \t]+")
_CODE_FENCE = re.compile(r"(?m)^[ \t]*(```|~~~)[^\n]*\n?")
_INLINE_CODE = re.compile(r"`([^`\n]+)`")
_IMAGE = re.compile(r"!\[([^\]]*)\]\([^)]*\)")
_LINK = re.compile(r"\[([^\]]+)\]\([^)]*\)")
_BLANK_LINES = re.compile(r"\n\s*\n+")
_TITLE_FIELD = re.compile(r"""(?m)^title:\s*["']?(.+?)["']?\s*$""")
_NUMERIC_PREFIX = re.compile(r"^\d+[-_]")


def find_markdown_files(docs_dir: Union[str, Path]) -> list[Path]:
    """
    Recursively collect markdown files below ``docs_dir``.

    Returns paths in sorted order so repeated ingestion runs see the
    documents in the same sequence.
    """
    root = Path(docs_dir)
    if not root.is_dir():
        return []
    return sorted(
        path for path in root.rglob("*")
        if path.is_file() and path.suffix.lower() in MARKDOWN_SUFFIXES
    )


def clean_markdown(content: str) -> str:
    """
    Strip markdown syntax and keep readable text.

    Args:
        content: Raw markdown file content.

    Returns:
        Cleaned text with paragraphs separated by single blank lines.
    """
    text = content.replace("\r\n", "\n")
    text = _FRONT_MATTER.sub("", text, count=1)
    text = _HTML_COMMENT.sub("", text)
    text = _CODE_FENCE.sub("", text)
    text = _HEADING_MARKER.sub("", text)
    text = _IMAGE.sub(r"\1", text)
    text = _LINK.sub(r"\1", text)
    text = _INLINE_CODE.sub(r"\1", text)

    lines = [line.rstrip() for line in text.split("\n")]
    text = "\n".join(lines)
    text = _BLANK_LINES.sub("\n\n", text)
    return text.strip()


def extract_source_ref(
    path: Union[str, Path],
    content: str,
    docs_dir: Union[str, Path],
) -> SourceRef:
    """
    Build the SourceRef for a document.

    - ``file``: path relative to the parent of ``docs_dir`` (e.g.
      ``docs/physical-ai/01-intro.md``), POSIX separators
    - ``section``: name of the directory holding the file
    - ``title``: front matter ``title:`` if present, else the file name
      without numeric prefix, hyphens turned into spaces
    """
    path = Path(path)
    docs_root = Path(docs_dir)

    try:
        relative = path.resolve().relative_to(docs_root.resolve().parent)
    except ValueError:
        relative = Path(path.name)

    front_matter = _FRONT_MATTER.match(content.replace("\r\n", "\n"))
    title = ""
    if front_matter:
        match = _TITLE_FIELD.search(front_matter.group())
        if match:
            title = match.group(1).strip()
    if not title:
        title = _NUMERIC_PREFIX.sub("", path.stem).replace("-", " ").replace("_", " ").strip()

    return SourceRef(
        file=relative.as_posix(),
        section=path.parent.name,
        title=title,
    )


def document_id_for(source: SourceRef) -> str:
    """Stable document ID: the source file path without its suffix."""
    file = source.file
    for suffix in MARKDOWN_SUFFIXES:
        if file.lower().endswith(suffix):
            return file[: -len(suffix)]
    return file
