"""
Optional interaction analytics with A/B experiment statistics.
"""

__version__ = "1.0.0"

from .models import Experiment, ExperimentResults, Interaction, VariantStats, WinnerDecision
from .stats import calculate_stats, determine_winner
from .tracker import AnalyticsTracker

__all__ = [
    "__version__",
    "AnalyticsTracker",
    "Experiment",
    "ExperimentResults",
    "Interaction",
    "VariantStats",
    "WinnerDecision",
    "calculate_stats",
    "determine_winner",
]
