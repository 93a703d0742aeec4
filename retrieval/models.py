from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator


class QueryRequest(BaseModel):
    query: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("query", "message"),
    )
    top_k: Optional[int] = Field(None, ge=1, le=50)

    @field_validator("query")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Query must be a non-empty string")
        return value


class SourceInfo(BaseModel):
    label: str
    title: str = ""
    section: str = ""
    file: str
    confidence: int


class SearchHit(BaseModel):
    record_id: str
    text: str
    source: SourceInfo
    score: float


class SearchResponse(BaseModel):
    query: str
    results: list[SearchHit] = Field(default_factory=list)
    context_text: str = ""
    timestamp: datetime = Field(default_factory=datetime.utcnow)
