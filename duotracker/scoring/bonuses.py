"""Per-player feat bonuses and pair-level bonuses."""

from duotracker.models import PlayerGameStats
from duotracker.scoring.models import RiskBonus, ScoringConfig, SpecialBonuses


def calculate_special_bonuses(stats: PlayerGameStats, config: ScoringConfig) -> SpecialBonuses:
    """Award multikill, first blood and killing spree feats.

    Multikill counters overlap (a pentakill also counts as a quadra and a
    triple), so only the highest multikill tier achieved pays.
    """
    bonuses = SpecialBonuses()

    if stats.penta_kills > 0:
        bonuses.pentakill = config.pentakill_points * stats.penta_kills
    elif stats.quadra_kills > 0:
        bonuses.quadrakill = config.quadrakill_points * stats.quadra_kills
    elif stats.triple_kills > 0:
        bonuses.triplekill = config.triplekill_points * stats.triple_kills

    if stats.first_blood_kill:
        bonuses.first_blood = config.first_blood_points

    if stats.largest_killing_spree >= config.killing_spree_threshold:
        bonuses.killing_spree = config.killing_spree_points

    return bonuses


def calculate_no_death_bonus(noob_deaths: int, carry_deaths: int, config: ScoringConfig) -> int:
    if noob_deaths == 0 and carry_deaths == 0:
        return config.no_death_bonus
    return 0


def calculate_risk_bonus(
    noob: PlayerGameStats,
    carry: PlayerGameStats,
    config: ScoringConfig,
) -> RiskBonus:
    """Risk bonus from the H-score: how many of the four off-role/off-champion flags are set."""
    off_role = sum([noob.is_off_role, carry.is_off_role])
    off_champion = sum([noob.is_off_champion, carry.is_off_champion])
    h_score = off_role + off_champion
    return RiskBonus(
        off_role=off_role,
        off_champion=off_champion,
        h_score=h_score,
        final=config.risk_bonus_by_h_score.get(h_score, 0),
    )
