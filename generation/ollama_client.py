"""
Minimal client for the Ollama ``/api/chat`` endpoint.

Failures are reported with builtin exception types so callers can map
them without importing urllib:

- ``TimeoutError``: no reply within ``timeout`` seconds
- ``ConnectionError``: Ollama is not reachable
- ``RuntimeError``: HTTP error status, a truncated or undecodable reply,
  or a body that is not a JSON object
"""

from __future__ import annotations

import http.client
import json
import socket
from typing import Any
from urllib import request
from urllib.error import HTTPError, URLError


def _post(url: str, payload: dict[str, Any], timeout: float) -> dict[str, Any]:
    req = request.Request(
        url,
        data=json.dumps(payload, ensure_ascii=False).encode("utf-8"),
        headers={"Content-Type": "application/json"},
        method="POST",
    )
    try:
        with request.urlopen(req, timeout=timeout) as resp:
            body = resp.read().decode("utf-8")
    except HTTPError as exc:
        detail = exc.read().decode("utf-8") if exc.fp else ""
        raise RuntimeError(f"HTTP {exc.code} calling {url}: {detail}") from exc
    except URLError as exc:
        if isinstance(exc.reason, (socket.timeout, TimeoutError)):
            raise TimeoutError(f"No reply from {url} within {timeout}s") from exc
        raise ConnectionError(f"Cannot reach {url}: {exc.reason}") from exc
    except (socket.timeout, TimeoutError) as exc:
        raise TimeoutError(f"No reply from {url} within {timeout}s") from exc
    except http.client.HTTPException as exc:
        raise RuntimeError(f"Incomplete reply from {url}: {exc!r}") from exc
    except UnicodeDecodeError as exc:
        raise RuntimeError(f"Reply from {url} is not UTF-8") from exc

    try:
        data = json.loads(body)
    except json.JSONDecodeError as exc:
        raise RuntimeError(f"Invalid JSON from {url}: {body[:200]}") from exc
    if not isinstance(data, dict):
        raise RuntimeError(f"Expected a JSON object from {url}, got {type(data).__name__}")
    return data


def chat(
    base_url: str,
    model: str,
    system_prompt: str,
    user_prompt: str,
    temperature: float = 0.7,
    top_p: float = 0.9,
    output_tokens: int = 200,
    timeout: float = 60,
) -> str:
    """Single non-streaming chat turn; returns the assistant message text."""
    payload = {
        "model": model,
        "stream": False,
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        "options": {
            "temperature": temperature,
            "top_p": top_p,
            "num_predict": output_tokens,
        },
    }
    response = _post(f"{base_url.rstrip('/')}/api/chat", payload, timeout=timeout)
    if "error" in response:
        raise RuntimeError(f"Ollama error: {response['error']}")
    message = response.get("message")
    if not isinstance(message, dict):
        return ""
    content = message.get("content", "")
    return content if isinstance(content, str) else ""
