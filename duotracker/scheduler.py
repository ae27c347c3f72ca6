"""Adaptive polling scheduler that discovers and scores finished duo matches.

One timer task ticks every ``interval`` seconds and launches a poll cycle
unless the previous one is still running (overrunning ticks are skipped,
not queued). A cycle walks the tracked duos one at a time, so the only
suspension points are Riot API calls and every store mutation happens on
the event loop that owns the scheduler.

The interval follows the number of tracked duos so that the two match-id
calls per duo per cycle stay at or below 40 calls a minute, 80% of the
development key quota (100 calls per 2 minutes).
"""

from __future__ import annotations

import asyncio

from pydantic import BaseModel, Field

from duotracker.config import TrackerConfig
from duotracker.events import EventHandler, NullEventHandler
from duotracker.logging import duo_context, get_logger
from duotracker.matches import build_match_record, find_duo_participants, is_eligible
from duotracker.models import Duo, Player, RankInfo
from duotracker.riot import Participant, RiotApiError, RiotClient
from duotracker.scoring.engine import score_match
from duotracker.scoring.models import ScoringConfig
from duotracker.store import ChallengeStore

log = get_logger(__name__)

# (max duos, interval seconds)
TIER_INTERVALS: list[tuple[int, float]] = [
    (4, 30.0),
    (8, 45.0),
    (12, 60.0),
    (16, 90.0),
    (20, 120.0),
]
LINEAR_SECONDS_PER_DUO = 7.5
DEFAULT_BASE_INTERVAL = 60.0

MATCH_ID_CALLS_PER_DUO = 2
SAFE_CALLS_PER_MINUTE = 40


def compute_interval(duo_count: int, base_interval: float = DEFAULT_BASE_INTERVAL) -> float:
    """Ideal poll interval in seconds for ``duo_count`` tracked duos."""
    if duo_count <= 0:
        return base_interval
    for max_duos, interval in TIER_INTERVALS:
        if duo_count <= max_duos:
            return interval
    return duo_count * LINEAR_SECONDS_PER_DUO


def calls_per_minute(duo_count: int, interval: float) -> float:
    """Steady-state match-id calls per minute at a given interval."""
    if duo_count <= 0:
        return 0.0
    return duo_count * MATCH_ID_CALLS_PER_DUO * (60.0 / interval)


def needs_reschedule(current: float, ideal: float, threshold: float = 0.1) -> bool:
    """Only reschedule when the ideal interval moved by more than ``threshold`` of the current one."""
    return abs(ideal - current) > current * threshold


class PollSummary(BaseModel):
    """Outcome of one poll cycle."""
    duos_polled: int = 0
    matches_scored: int = 0
    failed_duos: list[int] = Field(default_factory=list)
    skipped: bool = False


class MatchScheduler:
    """Polls the Riot API for every tracked duo and scores new shared matches."""

    def __init__(
        self,
        store: ChallengeStore,
        client: RiotClient,
        config: TrackerConfig | None = None,
        event_handler: EventHandler | None = None,
        scoring_config: ScoringConfig | None = None,
    ):
        """Initialize the scheduler.

        Args:
            store: Shared challenge records (duos, players, matches)
            client: Riot API client
            config: Tracker settings (uses defaults if None)
            event_handler: Receives found/scored/error events (uses NullEventHandler if None)
            scoring_config: Scoring constants (uses defaults if None)
        """
        self.store = store
        self.client = client
        self.config = config or TrackerConfig()
        self.event_handler = event_handler or NullEventHandler()
        self.scoring_config = scoring_config

        self.interval = compute_interval(len(store.duos), self.config.base_interval_seconds)

        self._timer: asyncio.Task | None = None
        self._cycle: asyncio.Task | None = None
        self._polling = False

    @property
    def is_running(self) -> bool:
        return self._timer is not None

    @property
    def is_polling(self) -> bool:
        return self._polling

    def start(self) -> None:
        """Poll immediately, then every ``interval`` seconds. Must run inside an event loop."""
        if self._timer is not None:
            log.info("scheduler_already_running")
            return

        log.info("scheduler_started", interval_seconds=self.interval, duos=len(self.store.duos))
        self._launch_cycle()
        self._timer = asyncio.create_task(self._tick(self.interval))

    def stop(self) -> None:
        """Clear the timer. A cycle already in flight is allowed to finish."""
        if self._timer is None:
            return
        self._timer.cancel()
        self._timer = None
        log.info("scheduler_stopped")

    async def wait_idle(self) -> None:
        """Wait for the in-flight cycle, if any."""
        cycle = self._cycle
        if cycle is not None and not cycle.done():
            await asyncio.wait({cycle})

    async def _tick(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            self._launch_cycle()

    def _launch_cycle(self) -> bool:
        if self._polling or (self._cycle is not None and not self._cycle.done()):
            log.debug("poll_tick_skipped", interval_seconds=self.interval)
            return False
        self._cycle = asyncio.create_task(self._run_cycle())
        return True

    async def _run_cycle(self) -> None:
        try:
            await self.poll_once()
        except Exception:
            log.exception("poll_cycle_failed")

    def _reschedule_if_needed(self) -> None:
        ideal = compute_interval(len(self.store.duos), self.config.base_interval_seconds)
        if not needs_reschedule(self.interval, ideal, self.config.reschedule_threshold):
            return

        log.info(
            "poll_rescheduled",
            previous_seconds=self.interval,
            interval_seconds=ideal,
            duos=len(self.store.duos),
        )
        self.interval = ideal
        if self._timer is not None:
            self._timer.cancel()
            self._timer = asyncio.create_task(self._tick(ideal))

    async def poll_once(self) -> PollSummary:
        """Run one discovery cycle over every tracked duo.

        Returns:
            PollSummary; ``skipped`` is True if another cycle was already running
        """
        if self._polling:
            log.debug("poll_tick_skipped", interval_seconds=self.interval)
            return PollSummary(skipped=True)

        self._polling = True
        try:
            summary = await self._poll_all()
        finally:
            self._polling = False

        if summary.matches_scored:
            log.info(
                "poll_cycle_complete",
                duos_polled=summary.duos_polled,
                matches_scored=summary.matches_scored,
                failed_duos=summary.failed_duos,
            )
        else:
            log.debug("poll_cycle_complete", duos_polled=summary.duos_polled)

        self.event_handler.on_poll_complete(summary)
        self._reschedule_if_needed()
        return summary

    async def _poll_all(self) -> PollSummary:
        summary = PollSummary()

        for duo in self.store.tracked_duos():
            noob, carry = self.store.players_for(duo)
            if noob is None or carry is None or not noob.puuid or not carry.puuid:
                continue

            summary.duos_polled += 1
            with duo_context(duo.id, duo.name):
                try:
                    summary.matches_scored += await self._poll_duo(duo, noob, carry)
                except RiotApiError as exc:
                    log.warning("pair_poll_failed", status=exc.status, error=str(exc))
                    summary.failed_duos.append(duo.id)
                    self.event_handler.on_pair_error(duo, exc)
                except Exception as exc:
                    log.exception("pair_poll_crashed", error=str(exc))
                    summary.failed_duos.append(duo.id)
                    self.event_handler.on_pair_error(duo, exc)

        return summary

    async def _poll_duo(self, duo: Duo, noob: Player, carry: Player) -> int:
        """Discover and score new shared matches for one duo. Returns the number scored."""
        noob_ids, carry_ids = await asyncio.gather(
            self.client.recent_match_ids(noob.puuid, self.config.matches_per_player, self.config.queue_id),
            self.client.recent_match_ids(carry.puuid, self.config.matches_per_player, self.config.queue_id),
        )

        carry_set = set(carry_ids)
        # Riot lists newest first; streaks need chronological order
        common = [match_id for match_id in reversed(noob_ids) if match_id in carry_set]

        scored = 0
        for match_id in common:
            if self.store.has_match(match_id):
                continue

            details = await self.client.match_details(match_id)
            if details is None:
                continue
            details.match_id = details.match_id or match_id

            if not is_eligible(details, self.config.queue_id, self.config.event_start):
                continue

            participants = find_duo_participants(details, noob, carry)
            if participants is None:
                continue
            noob_data, carry_data = participants

            noob_rank, carry_rank = await self._fetch_ranks(noob_data, carry_data)
            record = build_match_record(
                details, duo, noob, carry, noob_data, carry_data, noob_rank, carry_rank
            )

            if not self.store.add_match(record):
                continue
            self.event_handler.on_match_found(duo, record)

            result = score_match(
                record,
                noob_prior_streak=noob.streaks.current,
                carry_prior_streak=carry.streaks.current,
                config=self.scoring_config,
            )
            self.store.apply_result(record, result)
            self.event_handler.on_match_scored(duo, record, result)
            scored += 1

        return scored

    async def _fetch_ranks(
        self,
        noob_data: Participant,
        carry_data: Participant,
    ) -> tuple[RankInfo | None, RankInfo | None]:
        """Post-match ranks; None (keep the stored rank) if the lookup fails."""
        try:
            noob_rank, carry_rank = await asyncio.gather(
                self.client.rank_by_summoner_id(noob_data.summoner_id),
                self.client.rank_by_summoner_id(carry_data.summoner_id),
            )
        except RiotApiError as exc:
            log.warning("rank_fetch_failed", status=exc.status, error=str(exc))
            return None, None
        return noob_rank, carry_rank
