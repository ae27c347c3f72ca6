"""Rank fairness multiplier for lopsided pairs.

Only the weaker half of a badly mismatched pair loses points: a player
more than one tier (4 divisions) below the pair average has their raw
points scaled down by 5% per division of deficit, floored at 50%.
"""

from duotracker.models import RankInfo
from duotracker.scoring.ranks import rank_to_value

TIER_WIDTH = 4
REDUCTION_PER_DIVISION = 1 / 20
MIN_MULTIPLIER = 0.5


def rank_multiplier(self_rank: RankInfo, partner_rank: RankInfo) -> float:
    """Scaling factor in [0.5, 1.0] for a player paired with ``partner_rank``."""
    own_value = rank_to_value(self_rank)
    partner_value = rank_to_value(partner_rank)

    average = (own_value + partner_value) / 2
    threshold = average - TIER_WIDTH
    if own_value >= threshold:
        return 1.0

    deficit = threshold - own_value
    return max(MIN_MULTIPLIER, 1.0 - deficit * REDUCTION_PER_DIVISION)


def pair_multipliers(noob_rank: RankInfo, carry_rank: RankInfo) -> tuple[float, float]:
    """Return ``(noob_multiplier, carry_multiplier)``, each scaled against the other's rank."""
    return (
        rank_multiplier(noob_rank, carry_rank),
        rank_multiplier(carry_rank, noob_rank),
    )
