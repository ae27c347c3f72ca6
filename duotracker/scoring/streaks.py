"""Streak arithmetic.

Counters are signed: ``+n`` means n wins in a row, ``-n`` n losses in a row.
A result that breaks a run restarts the counter at +1 / -1.
"""

from duotracker.scoring.models import ScoringConfig, StreakScore


def next_streak(prior: int, win: bool) -> int:
    """Return the streak counter after one more game."""
    if win:
        return max(prior + 1, 1)
    return prior - 1 if prior <= 0 else -1


def streak_milestone(count: int, win: bool, config: ScoringConfig) -> int:
    """Bonus (or malus) paid on the game that reaches a milestone count."""
    schedule = config.win_streak_milestones if win else config.loss_streak_milestones
    return schedule.get(count, 0)


def calculate_streak(prior: int, win: bool, config: ScoringConfig) -> StreakScore:
    count = next_streak(prior, win)
    milestone = streak_milestone(count, win, config)
    return StreakScore(
        previous=prior,
        progressive=count,
        milestone=milestone,
        total=count + milestone,
    )
