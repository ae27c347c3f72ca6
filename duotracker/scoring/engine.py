"""Deterministic scoring pipeline for one completed match.

Stages run in a fixed order and each feeds the next:

1. remake / early-game gate
2. base game result
3. streak (from each player's streak *before* this game)
4. special feat bonuses
5. per-player raw total
6. rank fairness scaling (rounded half away from zero)
7. individual cap
8. pair bonuses (no death, risk)
9. pair total and pair cap
10. alerts

The pipeline is a pure function: it never mutates the match or the streak
counters and it has no error path. Callers guarantee both players were on
the same team.
"""

import math

from duotracker.models import MatchRecord, PlayerGameStats, RankInfo, Role
from duotracker.scoring.bonuses import (
    calculate_no_death_bonus,
    calculate_risk_bonus,
    calculate_special_bonuses,
)
from duotracker.scoring.models import (
    Alert,
    GameResultScore,
    PairScore,
    PlayerScore,
    ScoreResult,
    ScoringConfig,
)
from duotracker.scoring.multiplier import rank_multiplier
from duotracker.scoring.streaks import calculate_streak

DEFAULT_CONFIG = ScoringConfig()


def round_half_away_from_zero(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(upper, value))


def is_remake_or_early_game(match: MatchRecord, config: ScoringConfig = DEFAULT_CONFIG) -> bool:
    return match.remake or match.duration < config.early_game_seconds


def calculate_game_result(match: MatchRecord, config: ScoringConfig = DEFAULT_CONFIG) -> GameResultScore:
    """Base points for the match outcome. KDA plays no role here."""
    if match.win:
        if match.duration < config.fast_win_seconds:
            points = config.fast_win_points
        else:
            points = config.standard_win_points
    elif match.surrender:
        points = config.surrender_loss_points
    else:
        points = config.standard_loss_points
    return GameResultScore(base_points=points, final=points)


def _score_player(
    role: Role,
    match: MatchRecord,
    stats: PlayerGameStats,
    partner_rank: RankInfo,
    prior_streak: int,
    game_result: GameResultScore,
    config: ScoringConfig,
    alerts: list[Alert],
) -> PlayerScore:
    streak = calculate_streak(prior_streak, match.win, config)
    if streak.milestone:
        alerts.append(Alert(
            type="win_streak" if match.win else "loss_streak",
            player=role,
            value=streak.progressive,
        ))

    special = calculate_special_bonuses(stats, config)
    if special.pentakill:
        alerts.append(Alert(type="pentakill", player=role, value=stats.penta_kills))
    elif special.quadrakill:
        alerts.append(Alert(type="quadrakill", player=role, value=stats.quadra_kills))
    elif special.triplekill:
        alerts.append(Alert(type="triplekill", player=role, value=stats.triple_kills))
    if special.first_blood:
        alerts.append(Alert(type="first_blood", player=role))
    if special.killing_spree:
        alerts.append(Alert(type="killing_spree", player=role, value=stats.largest_killing_spree))

    raw = game_result.final + streak.total + special.total

    multiplier = rank_multiplier(stats.previous_rank, partner_rank)
    scaled = round_half_away_from_zero(raw * multiplier)
    if multiplier < 1.0:
        alerts.append(Alert(type="rank_penalty", player=role))

    capped = clamp(scaled, config.player_min, config.player_max)
    if capped != scaled:
        alerts.append(Alert(type="player_cap", player=role, value=scaled))

    return PlayerScore(
        game_result=game_result,
        streak=streak,
        special_bonuses=special,
        raw=raw,
        multiplier=multiplier,
        scaled=scaled,
        capped=capped,
    )


def score_match(
    match: MatchRecord,
    noob_prior_streak: int,
    carry_prior_streak: int,
    config: ScoringConfig | None = None,
) -> ScoreResult:
    """Turn one match into point awards for the noob, the carry and the pair.

    Args:
        match: The discovered match, including both players' stats
        noob_prior_streak: Noob's signed streak counter before this match
        carry_prior_streak: Carry's signed streak counter before this match
        config: Tunable constants (defaults if None)

    Returns:
        ScoreResult whose ``total`` is the pair's capped award
    """
    config = config or DEFAULT_CONFIG
    noob_stats = match.noob_stats
    carry_stats = match.carry_stats

    if is_remake_or_early_game(match, config):
        return ScoreResult(is_remake_or_early_game=True, alerts=[Alert(type="remake")])

    alerts: list[Alert] = []
    if not match.win and match.surrender:
        alerts.append(Alert(type="surrender"))

    game_result = calculate_game_result(match, config)

    noob = _score_player(
        "noob", match, noob_stats, carry_stats.previous_rank,
        noob_prior_streak, game_result, config, alerts,
    )
    carry = _score_player(
        "carry", match, carry_stats, noob_stats.previous_rank,
        carry_prior_streak, game_result, config, alerts,
    )

    no_death = calculate_no_death_bonus(noob_stats.deaths, carry_stats.deaths, config)
    if no_death:
        alerts.append(Alert(type="no_death"))

    risk = calculate_risk_bonus(noob_stats, carry_stats, config)
    if risk.final:
        alerts.append(Alert(type="risk_bonus", value=risk.h_score))

    pair_sum = noob.capped + carry.capped
    pair_raw = pair_sum + no_death + risk.final
    pair_capped = clamp(pair_raw, config.pair_min, config.pair_max)
    if pair_capped != pair_raw:
        alerts.append(Alert(type="pair_cap", value=pair_raw))

    return ScoreResult(
        noob=noob,
        carry=carry,
        pair=PairScore(
            sum=pair_sum,
            no_death_bonus=no_death,
            risk_bonus=risk,
            raw=pair_raw,
            capped=pair_capped,
        ),
        total=pair_capped,
        is_remake_or_early_game=False,
        alerts=alerts,
    )
