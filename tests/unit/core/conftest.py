"""Shared builders for duo tracker tests."""

from datetime import UTC, datetime

import pytest

from duotracker.models import Duo, MatchRecord, Player, PlayerGameStats
from duotracker.riot import MatchDetails, Participant
from duotracker.scoring.ranks import parse_rank_string

EVENT_START = datetime(2025, 1, 6, tzinfo=UTC)
MATCH_CREATION_MS = int(datetime(2025, 1, 10, 20, 0, tzinfo=UTC).timestamp() * 1000)


def build_stats(**overrides) -> PlayerGameStats:
    rank = overrides.pop("rank", "G2")
    values = {
        "puuid": "puuid",
        "team_id": 100,
        "kills": 5,
        "deaths": 3,
        "assists": 7,
        "previous_rank": parse_rank_string(rank),
        "new_rank": parse_rank_string(rank),
    }
    values.update(overrides)
    return PlayerGameStats(**values)


def build_match(noob: dict | None = None, carry: dict | None = None, **overrides) -> MatchRecord:
    values = {
        "match_id": "EUW1_1",
        "duo_id": 1,
        "win": True,
        "duration": 1800,
        "game_creation": datetime(2025, 1, 10, 20, 0, tzinfo=UTC),
        "noob_stats": build_stats(puuid="noob-puuid", **(noob or {})),
        "carry_stats": build_stats(puuid="carry-puuid", **(carry or {})),
    }
    values.update(overrides)
    return MatchRecord(**values)


def build_player(player_id: str, role: str, rank: str, **overrides) -> Player:
    values = {
        "player_id": player_id,
        "puuid": f"{player_id}-puuid",
        "game_name": player_id.capitalize(),
        "tag_line": "EUW",
        "role": role,
        "initial_rank": parse_rank_string(rank),
        "current_rank": parse_rank_string(rank),
    }
    values.update(overrides)
    return Player(**values)


def build_details(
    match_id: str,
    noob_puuid: str = "noob-puuid",
    carry_puuid: str = "carry-puuid",
    win: bool = True,
    noob_team: int = 100,
    carry_team: int = 100,
    **overrides,
) -> MatchDetails:
    participants = [
        Participant(
            puuid=noob_puuid, summoner_id=f"{noob_puuid}-summoner", team_id=noob_team,
            champion_name="Ahri", team_position="MIDDLE", win=win, kills=4, deaths=2, assists=6,
        ),
        Participant(
            puuid=carry_puuid, summoner_id=f"{carry_puuid}-summoner", team_id=carry_team,
            champion_name="Jinx", team_position="BOTTOM", win=win if carry_team == noob_team else not win,
            kills=9, deaths=1, assists=4,
        ),
        Participant(puuid="stranger", team_id=200, win=not win),
    ]
    values = {
        "match_id": match_id,
        "game_creation": MATCH_CREATION_MS,
        "duration": 1800,
        "queue_id": 420,
        "participants": participants,
    }
    values.update(overrides)
    return MatchDetails(**values)


@pytest.fixture
def stats_factory():
    return build_stats


@pytest.fixture
def match_factory():
    return build_match


@pytest.fixture
def player_factory():
    return build_player


@pytest.fixture
def details_factory():
    return build_details


@pytest.fixture
def duo_players():
    """A silver noob (mid Ahri main) and a diamond carry (adc Jinx main)."""
    noob = build_player("noob", "noob", "S2", main_role="MID", main_champion="Ahri")
    carry = build_player("carry", "carry", "D4", main_role="ADC", main_champion="Jinx")
    duo = Duo(id=1, name="Les Zinzins", noob_id=noob.player_id, carry_id=carry.player_id)
    return duo, noob, carry
