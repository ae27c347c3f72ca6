"""Run the match scheduler until interrupted.

Usage:
    python -m duotracker --state state.json
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

import aiohttp

from duotracker.config import TrackerConfig
from duotracker.logging import configure_logging, get_logger
from duotracker.riot import RiotClient
from duotracker.scheduler import MatchScheduler
from duotracker.store import ChallengeStore

log = get_logger(__name__)


def load_store(path: Path | None) -> ChallengeStore:
    if path is None or not path.exists():
        return ChallengeStore()
    return ChallengeStore.restore(json.loads(path.read_text(encoding="utf-8")))


def save_store(store: ChallengeStore, path: Path) -> None:
    path.write_text(json.dumps(store.snapshot(), indent=2), encoding="utf-8")


async def run(config: TrackerConfig, state_path: Path | None) -> None:
    store = load_store(state_path)
    log.info("state_loaded", players=len(store.players), duos=len(store.duos), matches=len(store.matches))

    async with aiohttp.ClientSession() as session:
        client = RiotClient(
            session,
            api_key=config.riot_api_key,
            region=config.region,
            max_retries=config.max_retries,
            timeout_seconds=config.request_timeout_seconds,
        )
        scheduler = MatchScheduler(store, client, config)
        scheduler.start()
        try:
            await asyncio.Event().wait()
        finally:
            scheduler.stop()
            await scheduler.wait_idle()
            if state_path is not None:
                save_store(store, state_path)
                log.info("state_saved", path=str(state_path))


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="duotracker", description="Ranked duo challenge match tracker")
    ap.add_argument("--state", type=Path, default=None, help="JSON snapshot to restore from and save to")
    ap.add_argument("--pretty", action="store_true", help="Human-readable console logs")
    args = ap.parse_args(argv)

    try:
        config = TrackerConfig.from_env()
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 2
    if not config.riot_api_key:
        print("RIOT_API_KEY is not set", file=sys.stderr)
        return 2

    configure_logging(cli_mode=args.pretty, log_level=config.log_level)

    try:
        asyncio.run(run(config, args.state))
    except KeyboardInterrupt:
        log.info("interrupted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
