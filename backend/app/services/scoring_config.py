"""Load per-kind scoring weights from ``config/scoring.json``.

Expected file shape::

    {"scoring": {"reaction": 1, "comment": 2, "repost": 3}}

Any failure (missing file, bad JSON, schema mismatch) logs a warning and falls
back to weight 1 for every kind; it never raises.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from backend.app.core.logging import log_event
from backend.app.core.settings import settings
from backend.app.models.leaderboard import ScoringConfig, ScoringWeights

logger = logging.getLogger(__name__)

DEFAULT_WEIGHTS = ScoringWeights(reaction=1, comment=1, repost=1)


def load_scoring_weights(path: str | Path | None = None) -> ScoringWeights:
    """Return the configured weights, or :data:`DEFAULT_WEIGHTS` on failure."""
    config_path = Path(path or settings.scoring_config_path)
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
        config = ScoringConfig.model_validate(raw)
    except (OSError, ValueError, ValidationError) as exc:
        log_event(
            logger, "warning", "scoring_config_fallback",
            path=config_path, detail=f"{type(exc).__name__}: {exc}",
        )
        return DEFAULT_WEIGHTS.model_copy()

    log_event(
        logger, "info", "scoring_config_loaded",
        path=config_path,
        reaction=config.scoring.reaction,
        comment=config.scoring.comment,
        repost=config.scoring.repost,
    )
    return config.scoring
