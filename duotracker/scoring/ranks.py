"""Conversions between ranked ladder positions and a scalar rank value.

The value is a total ordering over ranks (IRON IV = 0 ... DIAMOND I = 27,
MASTER = 28, GRANDMASTER = 32, CHALLENGER = 36) and is the only thing the
scoring pipeline ever compares.
"""

from duotracker.models import APEX_TIERS, Division, RankInfo, Tier

TIER_BASE_VALUES: dict[Tier, int] = {
    Tier.IRON: 0,
    Tier.BRONZE: 4,
    Tier.SILVER: 8,
    Tier.GOLD: 12,
    Tier.PLATINUM: 16,
    Tier.EMERALD: 20,
    Tier.DIAMOND: 24,
    Tier.MASTER: 28,
    Tier.GRANDMASTER: 32,
    Tier.CHALLENGER: 36,
}

DIVISION_OFFSETS: dict[Division, int] = {
    Division.IV: 0,
    Division.III: 1,
    Division.II: 2,
    Division.I: 3,
}

MAX_RANK_VALUE = TIER_BASE_VALUES[Tier.CHALLENGER]

_SHORT_TIERS: dict[str, Tier] = {
    "I": Tier.IRON,
    "B": Tier.BRONZE,
    "S": Tier.SILVER,
    "G": Tier.GOLD,
    "P": Tier.PLATINUM,
    "E": Tier.EMERALD,
    "D": Tier.DIAMOND,
    "M": Tier.MASTER,
    "GM": Tier.GRANDMASTER,
    "C": Tier.CHALLENGER,
}
_TIER_SHORT_NAMES = {tier: short for short, tier in _SHORT_TIERS.items()}

_DIVISION_NUMBERS: dict[str, Division] = {
    "4": Division.IV,
    "3": Division.III,
    "2": Division.II,
    "1": Division.I,
}
_DIVISION_SHORT_NAMES = {division: number for number, division in _DIVISION_NUMBERS.items()}


def rank_to_value(rank: RankInfo) -> int:
    """Convert a rank to its scalar value.

    GOLD IV = 12, GOLD III = 13, GOLD II = 14, GOLD I = 15; apex tiers
    ignore any division.
    """
    base = TIER_BASE_VALUES[rank.tier]
    if rank.tier in APEX_TIERS or rank.division is None:
        return base
    return base + DIVISION_OFFSETS[rank.division]


def value_to_rank(value: int) -> RankInfo:
    """Convert a scalar value back to the lowest rank holding it.

    Values are clamped to [0, 36]. Values between two apex tiers resolve
    to the lower apex tier.
    """
    value = max(0, min(MAX_RANK_VALUE, value))

    for tier, base in sorted(TIER_BASE_VALUES.items(), key=lambda item: item[1], reverse=True):
        if value < base:
            continue
        if tier in APEX_TIERS:
            return RankInfo(tier=tier)
        offset = value - base
        division = next(d for d, o in DIVISION_OFFSETS.items() if o == offset)
        return RankInfo(tier=tier, division=division)

    return RankInfo(tier=Tier.IRON, division=Division.IV)


def parse_rank_string(label: str) -> RankInfo:
    """Parse a short rank label such as ``"G2"``, ``"E4"``, ``"M"`` or ``"GM"``.

    Raises:
        ValueError: If the label does not name a known tier/division.
    """
    cleaned = label.strip().upper()
    letters = cleaned.rstrip("0123456789")
    number = cleaned[len(letters):]

    tier = _SHORT_TIERS.get(letters)
    if tier is None:
        raise ValueError(f"Unknown rank tier in {label!r}")

    if tier in APEX_TIERS:
        if number:
            raise ValueError(f"Apex tier {tier} takes no division: {label!r}")
        return RankInfo(tier=tier)

    division = _DIVISION_NUMBERS.get(number)
    if division is None:
        raise ValueError(f"Missing or invalid division in {label!r}")
    return RankInfo(tier=tier, division=division)


def format_rank_string(rank: RankInfo) -> str:
    """Format a rank as its short label (``GOLD II`` -> ``"G2"``)."""
    short = _TIER_SHORT_NAMES[rank.tier]
    if rank.tier in APEX_TIERS or rank.division is None:
        return short
    return f"{short}{_DIVISION_SHORT_NAMES[rank.division]}"
