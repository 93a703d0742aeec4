"""Small, deterministic post-processing for generated answers.

Only formatting is touched: echoed prompt scaffolding, dash variants and
runs of whitespace. No content is added.
"""

from __future__ import annotations

import re

_ANSWER_PREFIX = re.compile(r"^\s*(?:ANSWER|Answer)\s*:\s*")


def postprocess_answer(answer: str, prompt: str = "") -> str:
    text = (answer or "").strip()
    if not text:
        return text

    # Some models echo the prompt before the answer.
    if prompt and text.startswith(prompt.strip()):
        text = text[len(prompt.strip()):].strip()
    text = _ANSWER_PREFIX.sub("", text)

    text = text.replace(chr(0x2013), "-").replace(chr(0x2014), "-")

    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\n{3,}", "\n\n", text).strip()

    return text
