from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from retrieval.models import SourceInfo


class ChatRequest(BaseModel):
    query: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("query", "message"),
    )
    top_k: Optional[int] = Field(None, ge=1, le=50)
    variant: Optional[str] = None
    experiment_id: Optional[str] = None

    @field_validator("query")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Query must be a non-empty string")
        return value


class ChatResponse(BaseModel):
    reply: str
    sources: list[SourceInfo] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)


class FeedbackRequest(BaseModel):
    interaction_id: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)
