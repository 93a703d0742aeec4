SYSTEM_PROMPT = """You are an assistant that answers questions about the documentation site
(Physical AI, Prompt Engineering and Robotic Intelligence).

Rules:
1) Use ONLY the documentation excerpts provided in the context.
2) If the answer is not in the context, say "I don't have that information in the documentation."
3) Keep the answer short and plain; do not invent sources or page references.
4) Answer in the same language as the question.
"""


USER_PROMPT_TEMPLATE = """DOCUMENTATION CONTENT:
{context}

QUESTION: {query}

ANSWER:"""


def build_prompt(query: str, context: str) -> str:
    return USER_PROMPT_TEMPLATE.format(query=query.strip(), context=context)
