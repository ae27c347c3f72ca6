"""Domain models shared by the scoring pipeline, the scheduler and the store."""

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["noob", "carry"]


class Tier(str, Enum):
    IRON = "IRON"
    BRONZE = "BRONZE"
    SILVER = "SILVER"
    GOLD = "GOLD"
    PLATINUM = "PLATINUM"
    EMERALD = "EMERALD"
    DIAMOND = "DIAMOND"
    MASTER = "MASTER"
    GRANDMASTER = "GRANDMASTER"
    CHALLENGER = "CHALLENGER"

    def __str__(self) -> str:
        return self.value


class Division(str, Enum):
    IV = "IV"
    III = "III"
    II = "II"
    I = "I"  # noqa: E741

    def __str__(self) -> str:
        return self.value


APEX_TIERS = frozenset({Tier.MASTER, Tier.GRANDMASTER, Tier.CHALLENGER})


class RankInfo(BaseModel):
    """A ranked ladder position. Apex tiers have no division."""
    model_config = ConfigDict(frozen=True)

    tier: Tier
    division: Division | None = None
    league_points: int = 0

    def __str__(self) -> str:
        if self.division is None:
            return f"{self.tier} {self.league_points} LP"
        return f"{self.tier} {self.division} {self.league_points} LP"


class PlayerGameStats(BaseModel):
    """One player's telemetry for one match."""
    model_config = ConfigDict(frozen=True)

    puuid: str
    summoner_id: str = ""
    team_id: int
    champion_id: int = 0
    champion_name: str = ""
    lane: str = "UNKNOWN"
    kills: int = 0
    deaths: int = 0
    assists: int = 0
    is_off_role: bool = False
    is_off_champion: bool = False

    # Feats, absent on older payloads
    penta_kills: int = 0
    quadra_kills: int = 0
    triple_kills: int = 0
    first_blood_kill: bool = False
    largest_killing_spree: int = 0

    previous_rank: RankInfo
    new_rank: RankInfo

    @property
    def kda(self) -> str:
        return f"{self.kills}/{self.deaths}/{self.assists}"


class MatchRecord(BaseModel):
    """A discovered match. Only ``scored`` and ``points_awarded`` change after creation."""
    match_id: str
    duo_id: int
    win: bool
    remake: bool = False
    surrender: bool = False
    duration: int  # seconds
    game_creation: datetime
    noob_stats: PlayerGameStats
    carry_stats: PlayerGameStats
    scored: bool = False
    points_awarded: int = 0


class Streaks(BaseModel):
    """Signed streak counter: positive = wins in a row, negative = losses in a row."""
    current: int = 0
    longest_win: int = 0
    longest_loss: int = 0


class Player(BaseModel):
    """A registered challenge participant."""
    player_id: str  # Discord user id
    puuid: str = ""
    game_name: str
    tag_line: str
    role: Role
    duo_id: int = 0

    # Declared by the player at registration, used for off-role/off-champion checks
    main_role: str | None = None
    main_champion: str | None = None

    initial_rank: RankInfo
    current_rank: RankInfo

    total_points: int = 0
    games_played: int = 0
    wins: int = 0
    losses: int = 0
    streaks: Streaks = Field(default_factory=Streaks)

    registered_at: datetime = Field(default_factory=datetime.now)
    last_game_at: datetime | None = None

    @property
    def riot_id(self) -> str:
        return f"{self.game_name}#{self.tag_line}"


class Duo(BaseModel):
    """A linked noob/carry pair."""
    id: int
    name: str
    noob_id: str
    carry_id: str

    total_points: int = 0
    games_played: int = 0
    wins: int = 0
    losses: int = 0

    current_streak: int = 0
    longest_win_streak: int = 0
    longest_loss_streak: int = 0

    created_at: datetime = Field(default_factory=datetime.now)
    last_game_at: datetime | None = None
