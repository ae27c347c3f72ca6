"""Riot Games API client for ranked match telemetry (async).

Endpoints used:
- match-v5: recent match ids for a player, full match details
- league-v4: current ranked entry for a summoner

Rate limiting: a 429 response is retried after the ``Retry-After`` delay
announced by the server (2 seconds when absent), up to ``max_retries``
times, after which ``RateLimitError`` is raised to the caller.
API documentation: https://developer.riotgames.com/apis
"""

import asyncio
from datetime import UTC, datetime
from typing import Any

import aiohttp
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from duotracker.logging import get_logger
from duotracker.models import APEX_TIERS, Division, RankInfo, Tier

logger = get_logger(__name__)

RANKED_SOLO_QUEUE_ID = 420
RANKED_SOLO_QUEUE_TYPE = "RANKED_SOLO_5x5"

DEFAULT_RETRY_AFTER_SECONDS = 2
DEFAULT_TIMEOUT_SECONDS = 10
DEFAULT_MAX_RETRIES = 3
RIOT_MAX_CONCURRENT = 2

REGION_TO_ROUTING: dict[str, str] = {
    "euw1": "europe",
    "eun1": "europe",
    "ru": "europe",
    "tr1": "europe",
    "na1": "americas",
    "br1": "americas",
    "la1": "americas",
    "la2": "americas",
    "jp1": "asia",
    "kr": "asia",
    "oc1": "sea",
}


class RiotApiError(Exception):
    """Error response (or no response at all) from the Riot API."""

    def __init__(self, message: str, status: int = 0):
        super().__init__(message)
        self.status = status


class RateLimitError(RiotApiError):
    """Rate limit still exceeded after all retries."""

    def __init__(self, message: str, retry_after: float):
        super().__init__(message, status=429)
        self.retry_after = retry_after


class Participant(BaseModel):
    """One participant of a match-v5 payload."""
    model_config = ConfigDict(populate_by_name=True)

    puuid: str
    summoner_id: str = Field(default="", alias="summonerId")
    team_id: int = Field(alias="teamId")
    champion_id: int = Field(default=0, alias="championId")
    champion_name: str = Field(default="", alias="championName")
    team_position: str = Field(default="", alias="teamPosition")
    win: bool = False
    kills: int = 0
    deaths: int = 0
    assists: int = 0
    penta_kills: int = Field(default=0, alias="pentaKills")
    quadra_kills: int = Field(default=0, alias="quadraKills")
    triple_kills: int = Field(default=0, alias="tripleKills")
    double_kills: int = Field(default=0, alias="doubleKills")
    first_blood_kill: bool = Field(default=False, alias="firstBloodKill")
    largest_killing_spree: int = Field(default=0, alias="largestKillingSpree")


class MatchDetails(BaseModel):
    """The ``info`` section of a match-v5 payload, plus its match id."""
    model_config = ConfigDict(populate_by_name=True)

    match_id: str = ""
    game_creation: int = Field(alias="gameCreation")  # epoch milliseconds
    duration: int = Field(alias="gameDuration")  # seconds
    queue_id: int = Field(alias="queueId")
    early_surrender: bool = Field(default=False, alias="gameEndedInEarlySurrender")
    surrender: bool = Field(default=False, alias="gameEndedInSurrender")
    participants: list[Participant] = Field(default_factory=list)

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "MatchDetails":
        info = payload.get("info", payload)
        details = cls.model_validate(info)
        details.match_id = payload.get("metadata", {}).get("matchId", details.match_id)
        return details

    @property
    def created_at(self) -> datetime:
        return datetime.fromtimestamp(self.game_creation / 1000, tz=UTC)

    def participant(self, puuid: str) -> Participant | None:
        return next((p for p in self.participants if p.puuid == puuid), None)


def parse_league_entry(entry: dict[str, Any]) -> RankInfo:
    """Convert a league-v4 entry into a RankInfo."""
    tier = Tier(entry["tier"])
    division = None if tier in APEX_TIERS else Division(entry["rank"])
    return RankInfo(tier=tier, division=division, league_points=int(entry.get("leaguePoints", 0)))


def _parse_retry_after(value: str | None) -> float:
    if not value:
        return DEFAULT_RETRY_AFTER_SECONDS
    try:
        return max(0.0, float(value))
    except ValueError:
        return DEFAULT_RETRY_AFTER_SECONDS


class RiotClient:
    """Thin async wrapper over the Riot REST API.

    The caller owns the ``aiohttp.ClientSession``.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        api_key: str,
        region: str = "euw1",
        max_retries: int = DEFAULT_MAX_RETRIES,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        if not api_key:
            raise ValueError("Riot API key is required")
        if region not in REGION_TO_ROUTING:
            raise ValueError(f"Unknown Riot region: {region!r}")

        self.session = session
        self.api_key = api_key
        self.region = region
        self.max_retries = max_retries
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._semaphore = asyncio.Semaphore(RIOT_MAX_CONCURRENT)

    @property
    def platform_base(self) -> str:
        return f"https://{self.region}.api.riotgames.com"

    @property
    def routing_base(self) -> str:
        return f"https://{REGION_TO_ROUTING[self.region]}.api.riotgames.com"

    async def _make_request(
        self,
        url: str,
        params: dict[str, Any] | None = None,
    ) -> Any | None:
        """GET a Riot endpoint with rate-limit retries.

        Returns:
            Parsed JSON, or None on 404

        Raises:
            RateLimitError: 429 persisted through every retry
            RiotApiError: Any other error status, network failure or timeout
        """
        headers = {"X-Riot-Token": self.api_key, "Accept": "application/json"}

        async with self._semaphore:
            for attempt in range(self.max_retries + 1):
                try:
                    async with self.session.get(
                        url, params=params, headers=headers, timeout=self.timeout
                    ) as response:
                        if response.status == 404:
                            return None

                        if response.status == 429:
                            retry_after = _parse_retry_after(response.headers.get("Retry-After"))
                            if attempt >= self.max_retries:
                                raise RateLimitError(
                                    "Rate limit exceeded and max retries reached", retry_after
                                )
                            logger.warning(
                                "riot_rate_limited",
                                url=url,
                                retry_after=retry_after,
                                attempt=attempt + 1,
                                max_retries=self.max_retries,
                            )
                            await asyncio.sleep(retry_after)
                            continue

                        if response.status >= 400:
                            raise RiotApiError(
                                f"Riot API error {response.status} for {url}", response.status
                            )

                        try:
                            return await response.json()
                        except ValueError as exc:
                            raise RiotApiError(
                                f"Malformed JSON from Riot API for {url}", response.status
                            ) from exc
                except (aiohttp.ClientError, TimeoutError) as exc:
                    raise RiotApiError(f"No response from Riot API: {exc}") from exc

        # Only reachable with max_retries < 0
        raise RateLimitError("Rate limit exceeded", DEFAULT_RETRY_AFTER_SECONDS)

    async def recent_match_ids(
        self,
        puuid: str,
        count: int = 20,
        queue: int | None = RANKED_SOLO_QUEUE_ID,
    ) -> list[str]:
        """Most recent match ids for a player, newest first."""
        if not puuid:
            raise ValueError("PUUID is required")

        params: dict[str, Any] = {"count": count}
        if queue is not None:
            params["queue"] = queue

        url = f"{self.routing_base}/lol/match/v5/matches/by-puuid/{puuid}/ids"
        result = await self._make_request(url, params=params)
        return list(result or [])

    async def match_details(self, match_id: str) -> MatchDetails | None:
        """Full match details, or None when the match does not exist or its payload is unusable."""
        if not match_id:
            raise ValueError("Match ID is required")

        url = f"{self.routing_base}/lol/match/v5/matches/{match_id}"
        result = await self._make_request(url)
        if not result:
            return None
        if not isinstance(result, dict):
            logger.warning("match_payload_rejected", match_id=match_id, reason="not an object")
            return None
        try:
            return MatchDetails.from_api(result)
        except ValidationError as exc:
            logger.warning(
                "match_payload_rejected",
                match_id=match_id,
                errors=exc.error_count(),
                reason=str(exc.errors()[0]["loc"]),
            )
            return None

    async def rank_by_summoner_id(self, summoner_id: str) -> RankInfo | None:
        """Current solo-queue rank, or None when the summoner is unranked."""
        if not summoner_id:
            return None

        url = f"{self.platform_base}/lol/league/v4/entries/by-summoner/{summoner_id}"
        entries = await self._make_request(url)
        if not isinstance(entries, list):
            return None
        for entry in entries:
            if isinstance(entry, dict) and entry.get("queueType") == RANKED_SOLO_QUEUE_TYPE:
                try:
                    return parse_league_entry(entry)
                except (KeyError, TypeError, ValueError):
                    # Unknown tier or missing division: treat as unranked
                    logger.warning("league_entry_rejected", summoner_id=summoner_id, entry=entry)
                    return None
        return None
