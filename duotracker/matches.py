"""Turn raw match telemetry into match records for a tracked duo."""

from datetime import datetime

from duotracker.models import Duo, MatchRecord, Player, PlayerGameStats, RankInfo
from duotracker.riot import MatchDetails, Participant

# Declared main role -> match-v5 ``teamPosition``
ROLE_TO_LANE: dict[str, str] = {
    "TOP": "TOP",
    "JUNGLE": "JUNGLE",
    "JGL": "JUNGLE",
    "MID": "MIDDLE",
    "MIDDLE": "MIDDLE",
    "ADC": "BOTTOM",
    "BOT": "BOTTOM",
    "BOTTOM": "BOTTOM",
    "SUPPORT": "UTILITY",
    "SUPP": "UTILITY",
    "UTILITY": "UTILITY",
}


def is_off_role(player: Player, participant: Participant) -> bool:
    """True when the player declared a main role and played another lane.

    Games without a lane assignment (empty ``teamPosition``) never count.
    """
    if not player.main_role or not participant.team_position:
        return False
    lane = ROLE_TO_LANE.get(player.main_role.strip().upper(), player.main_role.strip().upper())
    return lane != participant.team_position


def is_off_champion(player: Player, participant: Participant) -> bool:
    """True when the player declared a main champion and picked another one."""
    if not player.main_champion:
        return False
    return player.main_champion.strip().lower() != participant.champion_name.lower()


def find_duo_participants(
    details: MatchDetails,
    noob: Player,
    carry: Player,
) -> tuple[Participant, Participant] | None:
    """Both players' participant entries, or None unless they were teammates."""
    noob_data = details.participant(noob.puuid)
    carry_data = details.participant(carry.puuid)
    if noob_data is None or carry_data is None:
        return None
    if noob_data.team_id != carry_data.team_id:
        return None
    return noob_data, carry_data


def is_eligible(details: MatchDetails, queue_id: int, event_start: datetime | None) -> bool:
    """Queue and event-window filter applied before anything is stored."""
    if details.queue_id != queue_id:
        return False
    if event_start is not None and details.created_at < event_start:
        return False
    return True


def build_player_stats(
    player: Player,
    participant: Participant,
    new_rank: RankInfo | None,
) -> PlayerGameStats:
    return PlayerGameStats(
        puuid=player.puuid,
        summoner_id=participant.summoner_id,
        team_id=participant.team_id,
        champion_id=participant.champion_id,
        champion_name=participant.champion_name,
        lane=participant.team_position or "UNKNOWN",
        kills=participant.kills,
        deaths=participant.deaths,
        assists=participant.assists,
        is_off_role=is_off_role(player, participant),
        is_off_champion=is_off_champion(player, participant),
        penta_kills=participant.penta_kills,
        quadra_kills=participant.quadra_kills,
        triple_kills=participant.triple_kills,
        first_blood_kill=participant.first_blood_kill,
        largest_killing_spree=participant.largest_killing_spree,
        previous_rank=player.current_rank,
        new_rank=new_rank or player.current_rank,
    )


def build_match_record(
    details: MatchDetails,
    duo: Duo,
    noob: Player,
    carry: Player,
    noob_data: Participant,
    carry_data: Participant,
    noob_new_rank: RankInfo | None = None,
    carry_new_rank: RankInfo | None = None,
) -> MatchRecord:
    return MatchRecord(
        match_id=details.match_id,
        duo_id=duo.id,
        win=noob_data.win,
        remake=details.early_surrender,
        surrender=details.surrender,
        duration=details.duration,
        game_creation=details.created_at,
        noob_stats=build_player_stats(noob, noob_data, noob_new_rank),
        carry_stats=build_player_stats(carry, carry_data, carry_new_rank),
    )
