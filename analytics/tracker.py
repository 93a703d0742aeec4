"""
Analytics Tracker - interaction log and A/B experiments in one JSON file

Every write re-reads the file, applies the change and replaces the file
atomically; a process-wide lock serialises writers. The file is created
on first use.

Usage:
    from analytics import AnalyticsTracker

    tracker = AnalyticsTracker("data/rag/analytics.json")
    exp_id = tracker.create_experiment("Prompt wording", variant_a="short", variant_b="long")
    interaction_id = tracker.track_interaction("What is ROS?", "ROS is...", [], 420, "B", exp_id)
    tracker.rate_interaction(interaction_id, 5)
    print(tracker.get_experiment_results(exp_id))
"""

import json
import os
import tempfile
import threading
import uuid
from pathlib import Path
from typing import Optional, Sequence, Union

from pydantic import ValidationError

from common.exceptions import RAGError
from common.logging_config import get_logger

from .models import AnalyticsData, Experiment, ExperimentResults, Interaction
from .stats import calculate_stats, determine_winner

logger = get_logger(__name__)


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


class AnalyticsTracker:
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = threading.Lock()

    # -------------------------------------------------------------------------
    # File access
    # -------------------------------------------------------------------------

    def load(self) -> AnalyticsData:
        if not self.path.is_file():
            return AnalyticsData()
        try:
            return AnalyticsData.model_validate(json.loads(self.path.read_text(encoding="utf-8")))
        except (json.JSONDecodeError, ValidationError) as e:
            raise RAGError(f"Analytics file is corrupt: {self.path}", str(e)) from e

    def _save(self, data: AnalyticsData) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        handle = tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=self.path.parent,
            prefix=f".{self.path.name}.",
            suffix=".tmp",
            delete=False,
        )
        try:
            with handle:
                handle.write(data.model_dump_json(indent=2))
            os.replace(handle.name, self.path)
        except BaseException:
            Path(handle.name).unlink(missing_ok=True)
            raise

    # -------------------------------------------------------------------------
    # Interactions
    # -------------------------------------------------------------------------

    def track_interaction(
        self,
        user_message: str,
        bot_response: str,
        sources: Sequence[dict],
        response_time_ms: int,
        variant: str = "A",
        experiment_id: Optional[str] = None,
        metadata: Optional[dict] = None,
    ) -> str:
        interaction = Interaction(
            id=_new_id("interaction"),
            variant=variant,
            experiment_id=experiment_id,
            user_message=user_message,
            bot_response=bot_response,
            sources=list(sources),
            response_time_ms=response_time_ms,
            metadata=metadata or {},
        )
        with self._lock:
            data = self.load()
            data.interactions.append(interaction)
            self._save(data)
        logger.debug("Tracked interaction %s (variant %s)", interaction.id, variant)
        return interaction.id

    def rate_interaction(self, interaction_id: str, rating: int) -> bool:
        """Attach a 1-5 rating; returns False for an unknown interaction."""
        if not 1 <= rating <= 5:
            raise ValueError(f"rating must be between 1 and 5, got {rating}")
        with self._lock:
            data = self.load()
            for interaction in data.interactions:
                if interaction.id == interaction_id:
                    interaction.user_rating = rating
                    self._save(data)
                    return True
        return False

    # -------------------------------------------------------------------------
    # Experiments
    # -------------------------------------------------------------------------

    def create_experiment(
        self,
        name: str,
        hypothesis: str = "",
        variant_a: str = "",
        variant_b: str = "",
        success_metric: str = "avg_rating",
        expected_duration: str = "7 days",
    ) -> str:
        experiment = Experiment(
            id=_new_id("exp"),
            name=name,
            hypothesis=hypothesis,
            variants={"A": variant_a, "B": variant_b},
            success_metric=success_metric,
            expected_duration=expected_duration,
        )
        with self._lock:
            data = self.load()
            data.experiments.append(experiment)
            self._save(data)
        logger.info("Experiment created: %s (%s)", experiment.name, experiment.id)
        return experiment.id

    def get_experiment_results(self, experiment_id: str) -> Optional[ExperimentResults]:
        data = self.load()
        experiment = next((e for e in data.experiments if e.id == experiment_id), None)
        if experiment is None:
            logger.error("Experiment not found: %s", experiment_id)
            return None

        runs = [i for i in data.interactions if i.experiment_id == experiment_id]
        stats_a = calculate_stats([i for i in runs if i.variant == "A"], "A")
        stats_b = calculate_stats([i for i in runs if i.variant == "B"], "B")

        return ExperimentResults(
            experiment_id=experiment_id,
            experiment=experiment.name,
            variant_a=stats_a,
            variant_b=stats_b,
            winner=determine_winner(stats_a, stats_b),
        )
