"""
A/B statistics over tracked interactions.

A variant needs MIN_SAMPLES interactions before it can win. Mean rating is
compared first; without ratings on both sides the lower mean response
time wins. Confidence is "High" once both variants reach HIGH_CONFIDENCE_SAMPLES.
"""

from typing import Sequence

from .models import Interaction, VariantStats, WinnerDecision

MIN_SAMPLES = 10
HIGH_CONFIDENCE_SAMPLES = 30


def calculate_stats(interactions: Sequence[Interaction], variant: str) -> VariantStats:
    if not interactions:
        return VariantStats(variant=variant)

    ratings = [i.user_rating for i in interactions if i.user_rating is not None]
    response_times = [i.response_time_ms for i in interactions]

    return VariantStats(
        variant=variant,
        sample_size=len(interactions),
        ratings=ratings,
        ratings_count=len(ratings),
        avg_rating=round(sum(ratings) / len(ratings), 2) if ratings else None,
        avg_response_time_ms=round(sum(response_times) / len(response_times)),
    )


def _confidence(a: VariantStats, b: VariantStats) -> str:
    if a.sample_size >= HIGH_CONFIDENCE_SAMPLES and b.sample_size >= HIGH_CONFIDENCE_SAMPLES:
        return "High"
    return "Medium"


def determine_winner(a: VariantStats, b: VariantStats) -> WinnerDecision:
    if a.sample_size < MIN_SAMPLES or b.sample_size < MIN_SAMPLES:
        return WinnerDecision(
            reason=f"Not enough data (need min {MIN_SAMPLES} samples per variant)",
        )

    if a.avg_rating is not None and b.avg_rating is not None:
        if a.avg_rating == b.avg_rating:
            return WinnerDecision(metric="avg_rating", difference=0.0, reason="Tie on average rating")
        return WinnerDecision(
            winner=a.variant if a.avg_rating > b.avg_rating else b.variant,
            metric="avg_rating",
            difference=round(abs(a.avg_rating - b.avg_rating), 2),
            confidence=_confidence(a, b),
        )

    if a.avg_response_time_ms is not None and b.avg_response_time_ms is not None:
        if a.avg_response_time_ms == b.avg_response_time_ms:
            return WinnerDecision(metric="avg_response_time_ms", difference=0.0, reason="Tie on response time")
        return WinnerDecision(
            winner=a.variant if a.avg_response_time_ms < b.avg_response_time_ms else b.variant,
            metric="avg_response_time_ms",
            difference=float(abs(a.avg_response_time_ms - b.avg_response_time_ms)),
            confidence=_confidence(a, b),
        )

    return WinnerDecision(reason="No comparable metrics")
