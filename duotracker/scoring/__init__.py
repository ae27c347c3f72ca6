"""Deterministic match scoring for noob/carry pairs."""

from duotracker.scoring.engine import score_match
from duotracker.scoring.models import Alert, PlayerScore, ScoreResult, ScoringConfig
from duotracker.scoring.multiplier import pair_multipliers, rank_multiplier
from duotracker.scoring.ranks import rank_to_value

__all__ = [
    "score_match",
    "Alert",
    "PlayerScore",
    "ScoreResult",
    "ScoringConfig",
    "pair_multipliers",
    "rank_multiplier",
    "rank_to_value",
]
