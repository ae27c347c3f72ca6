"""Unit tests for the challenge store."""

import json
from datetime import UTC, datetime

import pytest

from duotracker.scoring.engine import score_match
from duotracker.scoring.ranks import parse_rank_string
from duotracker.store import ChallengeStore

pytestmark = pytest.mark.unit


@pytest.fixture
def store(duo_players):
    duo, noob, carry = duo_players
    store = ChallengeStore()
    store.add_player(noob)
    store.add_player(carry)
    store.add_duo(duo)
    return store


def test_add_duo_links_players(store):
    """Adding a duo should link both players to it."""
    assert store.get_player("noob").duo_id == 1
    assert store.get_player("carry").duo_id == 1
    noob, carry = store.players_for(store.duos[1])
    assert (noob.player_id, carry.player_id) == ("noob", "carry")


def test_add_match_is_a_dedup_barrier(store, match_factory):
    """A known match id should never be inserted twice."""
    assert store.add_match(match_factory(match_id="EUW1_1")) is True
    assert store.add_match(match_factory(match_id="EUW1_1", win=False)) is False
    assert store.has_match("EUW1_1")
    assert store.matches["EUW1_1"].win is True
    assert len(store.matches_for(1)) == 1


def test_apply_win_updates_players_and_duo(store, match_factory):
    """Win should update points, counters, streaks and ranks."""
    record = match_factory(
        match_id="EUW1_1",
        noob={"rank": "S2", "new_rank": parse_rank_string("S1")},
        carry={"rank": "D4"},
    )
    store.add_match(record)
    result = score_match(record, 0, 0)

    store.apply_result(record, result)

    noob = store.get_player("noob")
    duo = store.duos[1]
    assert noob.total_points == result.noob.final
    assert noob.games_played == 1
    assert noob.wins == 1
    assert noob.streaks.current == 1
    assert noob.streaks.longest_win == 1
    assert noob.current_rank == parse_rank_string("S1")
    assert noob.last_game_at == datetime(2025, 1, 10, 20, 30, tzinfo=UTC)
    assert duo.total_points == result.total
    assert duo.wins == 1
    assert duo.current_streak == 1
    assert store.matches["EUW1_1"].scored is True
    assert store.matches["EUW1_1"].points_awarded == result.total


def test_losses_extend_negative_streaks(store, match_factory):
    """Consecutive losses should build a negative streak."""
    for index in range(3):
        record = match_factory(match_id=f"EUW1_{index}", win=False)
        store.add_match(record)
        noob = store.get_player("noob")
        store.apply_result(record, score_match(record, noob.streaks.current, 0))

    noob = store.get_player("noob")
    duo = store.duos[1]
    assert noob.losses == 3
    assert noob.streaks.current == -3
    assert noob.streaks.longest_loss == 3
    assert duo.current_streak == -3
    assert duo.longest_loss_streak == 3
    assert duo.longest_win_streak == 0


def test_remake_only_marks_scored(store, match_factory):
    """Remake should only flip the scored flag."""
    record = match_factory(match_id="EUW1_R", duration=200, remake=True)
    store.add_match(record)

    store.apply_result(record, score_match(record, 0, 0))

    noob = store.get_player("noob")
    assert store.matches["EUW1_R"].scored is True
    assert store.matches["EUW1_R"].points_awarded == 0
    assert noob.games_played == 0
    assert noob.streaks.current == 0
    assert store.duos[1].games_played == 0
    assert store.duos[1].last_game_at is None


def test_snapshot_round_trips_through_json(store, match_factory):
    """Snapshot should survive JSON and restore the same state."""
    record = match_factory(match_id="EUW1_1")
    store.add_match(record)
    store.apply_result(record, score_match(record, 0, 0))

    restored = ChallengeStore.restore(json.loads(json.dumps(store.snapshot())))

    assert restored.players == store.players
    assert restored.duos == store.duos
    assert restored.matches == store.matches
    assert restored.has_match("EUW1_1")


def test_restore_rejects_unknown_version():
    """Unknown snapshot version should raise ValueError."""
    with pytest.raises(ValueError):
        ChallengeStore.restore({"version": 99})
