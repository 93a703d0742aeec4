"""
Generation component for the docs RAG pipeline.

Answers questions from retrieved documentation excerpts with an Ollama
model, falling back to template answers when the model is unavailable.
"""

__version__ = "1.0.0"

from .config import GenerationConfig
from .fallback import template_answer
from .models import ChatRequest, ChatResponse, FeedbackRequest
from .prompts import SYSTEM_PROMPT, build_prompt
from .service import NO_RESULTS_REPLY, ChatService, OllamaGenerator

__all__ = [
    "__version__",
    "GenerationConfig",
    "ChatRequest",
    "ChatResponse",
    "FeedbackRequest",
    "ChatService",
    "OllamaGenerator",
    "NO_RESULTS_REPLY",
    "SYSTEM_PROMPT",
    "build_prompt",
    "template_answer",
]
