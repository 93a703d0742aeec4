from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


class Interaction(BaseModel):
    id: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    variant: str = "A"
    experiment_id: Optional[str] = None
    user_message: str
    bot_response: str
    sources: list[dict[str, Any]] = Field(default_factory=list)
    response_time_ms: int = 0
    user_rating: Optional[int] = Field(None, ge=1, le=5)
    metadata: dict[str, Any] = Field(default_factory=dict)


class Experiment(BaseModel):
    id: str
    created_at: datetime = Field(default_factory=datetime.utcnow)
    name: str
    hypothesis: str = ""
    variants: dict[str, str] = Field(default_factory=dict)
    success_metric: str = "avg_rating"
    status: str = "running"
    expected_duration: str = "7 days"


class AnalyticsData(BaseModel):
    version: str = "1.0"
    created_at: datetime = Field(default_factory=datetime.utcnow)
    experiments: list[Experiment] = Field(default_factory=list)
    interactions: list[Interaction] = Field(default_factory=list)


class VariantStats(BaseModel):
    variant: str
    sample_size: int = 0
    ratings: list[int] = Field(default_factory=list)
    ratings_count: int = 0
    avg_rating: Optional[float] = None
    avg_response_time_ms: Optional[int] = None


class WinnerDecision(BaseModel):
    winner: Optional[str] = None
    metric: Optional[str] = None
    difference: Optional[float] = None
    confidence: Optional[str] = None
    reason: Optional[str] = None


class ExperimentResults(BaseModel):
    experiment_id: str
    experiment: str
    variant_a: VariantStats
    variant_b: VariantStats
    winner: WinnerDecision
