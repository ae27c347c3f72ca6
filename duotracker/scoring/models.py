"""Data models for the scoring pipeline."""

from pydantic import BaseModel, Field

from duotracker.models import Role


class ScoringConfig(BaseModel):
    """Tunable constants of the scoring pipeline."""
    # Remake / early-game gate
    early_game_seconds: int = 300

    # Game result
    fast_win_seconds: int = 1200
    fast_win_points: int = 25
    standard_win_points: int = 20
    standard_loss_points: int = -20
    surrender_loss_points: int = -30

    # Streak milestones, keyed by the signed streak count reached this game
    win_streak_milestones: dict[int, int] = Field(default_factory=lambda: {3: 10, 5: 20})
    loss_streak_milestones: dict[int, int] = Field(default_factory=lambda: {-3: -10, -5: -20})

    # Special feats (per occurrence for multikills)
    pentakill_points: int = 30
    quadrakill_points: int = 15
    triplekill_points: int = 5
    first_blood_points: int = 5
    killing_spree_points: int = 10
    killing_spree_threshold: int = 7

    # Pair bonuses
    no_death_bonus: int = 20
    risk_bonus_by_h_score: dict[int, int] = Field(default_factory=lambda: {4: 15, 3: 10})

    # Caps
    player_min: int = -40
    player_max: int = 60
    pair_min: int = -70
    pair_max: int = 120


class GameResultScore(BaseModel):
    base_points: int = 0
    final: int = 0


class StreakScore(BaseModel):
    previous: int = 0
    progressive: int = 0  # signed streak count after this game
    milestone: int = 0
    total: int = 0


class SpecialBonuses(BaseModel):
    pentakill: int = 0
    quadrakill: int = 0
    triplekill: int = 0
    first_blood: int = 0
    killing_spree: int = 0

    @property
    def total(self) -> int:
        return self.pentakill + self.quadrakill + self.triplekill + self.first_blood + self.killing_spree


class PlayerScore(BaseModel):
    """One player's breakdown; ``final`` equals ``capped``."""
    game_result: GameResultScore = Field(default_factory=GameResultScore)
    streak: StreakScore = Field(default_factory=StreakScore)
    special_bonuses: SpecialBonuses = Field(default_factory=SpecialBonuses)
    raw: int = 0
    multiplier: float = 1.0
    scaled: int = 0
    capped: int = 0

    @property
    def final(self) -> int:
        return self.capped


class RiskBonus(BaseModel):
    off_role: int = 0  # players off their main role
    off_champion: int = 0  # players off their main champion
    h_score: int = 0
    final: int = 0


class PairScore(BaseModel):
    sum: int = 0
    no_death_bonus: int = 0
    risk_bonus: RiskBonus = Field(default_factory=RiskBonus)
    raw: int = 0
    capped: int = 0


class Alert(BaseModel):
    """A qualitative trigger met while scoring. Never affects points."""
    type: str
    player: Role | None = None
    value: int | None = None


class ScoreResult(BaseModel):
    noob: PlayerScore = Field(default_factory=PlayerScore)
    carry: PlayerScore = Field(default_factory=PlayerScore)
    pair: PairScore = Field(default_factory=PairScore)
    total: int = 0
    is_remake_or_early_game: bool = False
    alerts: list[Alert] = Field(default_factory=list)

    def has_alert(self, alert_type: str, player: Role | None = None) -> bool:
        return any(
            alert.type == alert_type and (player is None or alert.player == player)
            for alert in self.alerts
        )
