"""In-memory challenge state: players, duos and discovered matches.

The store is owned explicitly and passed to the scheduler and to any
presentation collaborator. It is not thread-safe; every mutation happens
on the scheduler's event loop. ``snapshot``/``restore`` are the hooks for
anyone who needs the state to outlive the process.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from duotracker.logging import get_logger
from duotracker.models import Duo, MatchRecord, Player, RankInfo
from duotracker.scoring.models import ScoreResult
from duotracker.scoring.streaks import next_streak

log = get_logger(__name__)

SNAPSHOT_VERSION = 1


class ChallengeStore:
    """Process-lifetime store of the challenge records."""

    def __init__(self) -> None:
        self.players: dict[str, Player] = {}
        self.duos: dict[int, Duo] = {}
        self.matches: dict[str, MatchRecord] = {}

    # Players and duos

    def add_player(self, player: Player) -> Player:
        self.players[player.player_id] = player
        return player

    def get_player(self, player_id: str) -> Player | None:
        return self.players.get(player_id)

    def add_duo(self, duo: Duo) -> Duo:
        """Register a duo and link both of its players to it."""
        for player_id in (duo.noob_id, duo.carry_id):
            player = self.players.get(player_id)
            if player is not None:
                player.duo_id = duo.id
        self.duos[duo.id] = duo
        return duo

    def tracked_duos(self) -> list[Duo]:
        return list(self.duos.values())

    def players_for(self, duo: Duo) -> tuple[Player | None, Player | None]:
        """Return ``(noob, carry)`` for a duo; either may be missing."""
        return self.players.get(duo.noob_id), self.players.get(duo.carry_id)

    # Matches

    def has_match(self, match_id: str) -> bool:
        return match_id in self.matches

    def add_match(self, record: MatchRecord) -> bool:
        """Insert a newly discovered match.

        This is the dedup barrier: a match id already present is never
        inserted (nor scored) again.

        Returns:
            True if inserted, False if the id was already known
        """
        if record.match_id in self.matches:
            return False
        self.matches[record.match_id] = record
        return True

    def mark_scored(self, match_id: str, points: int) -> None:
        record = self.matches[match_id]
        record.scored = True
        record.points_awarded = points

    def matches_for(self, duo_id: int) -> list[MatchRecord]:
        return [m for m in self.matches.values() if m.duo_id == duo_id]

    def apply_result(self, record: MatchRecord, result: ScoreResult) -> None:
        """Fold a scoring result into the duo and player records, then mark the match scored.

        Remakes and early games only flip the ``scored`` flag: they are not
        games played and do not touch streaks.
        """
        duo = self.duos[record.duo_id]
        noob, carry = self.players_for(duo)
        played_at = record.game_creation + timedelta(seconds=record.duration)

        if not result.is_remake_or_early_game:
            if noob is not None:
                _apply_to_player(noob, record.win, result.noob.final, record.noob_stats.new_rank, played_at)
            if carry is not None:
                _apply_to_player(carry, record.win, result.carry.final, record.carry_stats.new_rank, played_at)

            duo.total_points += result.total
            duo.games_played += 1
            if record.win:
                duo.wins += 1
            else:
                duo.losses += 1
            duo.current_streak = next_streak(duo.current_streak, record.win)
            duo.longest_win_streak = max(duo.longest_win_streak, duo.current_streak)
            duo.longest_loss_streak = max(duo.longest_loss_streak, -duo.current_streak)
            duo.last_game_at = played_at

        self.mark_scored(record.match_id, result.total)
        log.info(
            "match_scored",
            match_id=record.match_id,
            duo_id=duo.id,
            win=record.win,
            noob_points=result.noob.final,
            carry_points=result.carry.final,
            total=result.total,
            remake=result.is_remake_or_early_game,
        )

    # Durability hooks

    def snapshot(self) -> dict[str, Any]:
        """Return a JSON-serialisable copy of the whole state."""
        return {
            "version": SNAPSHOT_VERSION,
            "players": [p.model_dump(mode="json") for p in self.players.values()],
            "duos": [d.model_dump(mode="json") for d in self.duos.values()],
            "matches": [m.model_dump(mode="json") for m in self.matches.values()],
        }

    @classmethod
    def restore(cls, snapshot: dict[str, Any]) -> ChallengeStore:
        """Rebuild a store from ``snapshot()`` output.

        Raises:
            ValueError: If the snapshot version is not supported
        """
        version = snapshot.get("version", SNAPSHOT_VERSION)
        if version != SNAPSHOT_VERSION:
            raise ValueError(f"Unsupported snapshot version: {version}")

        store = cls()
        for raw in snapshot.get("players", []):
            store.add_player(Player.model_validate(raw))
        for raw in snapshot.get("duos", []):
            duo = Duo.model_validate(raw)
            store.duos[duo.id] = duo
        for raw in snapshot.get("matches", []):
            store.add_match(MatchRecord.model_validate(raw))
        return store


def _apply_to_player(
    player: Player, win: bool, points: int, new_rank: RankInfo, played_at: datetime
) -> None:
    player.total_points += points
    player.games_played += 1
    if win:
        player.wins += 1
    else:
        player.losses += 1

    streaks = player.streaks
    streaks.current = next_streak(streaks.current, win)
    streaks.longest_win = max(streaks.longest_win, streaks.current)
    streaks.longest_loss = max(streaks.longest_loss, -streaks.current)

    player.current_rank = new_rank
    player.last_game_at = played_at
