"""
Fixture generation for a tournament's teams.

Formats:
- bracket:     single elimination; seed 1 meets the lowest seed, byes go to
               the top seeds when the field is not a power of two
- round-robin: every team meets every other team once
- pool-play:   contiguous pools whose sizes differ by at most one, round-robin
               in each pool, then an empty bracket for the top two of every pool

Later-round bracket matches carry no teams; they are filled as results come in.
"""

import math
from dataclasses import dataclass
from typing import Hashable, List, Optional, Sequence

from league_admin.errors import InvalidInput

GENERATION_FORMATS = ["bracket", "round-robin", "pool-play"]
TEAMS_ADVANCING_PER_POOL = 2


@dataclass(frozen=True)
class SeededTeam:
    id: Hashable
    seed_position: Optional[int] = None


@dataclass(frozen=True)
class GeneratedMatch:
    match_number: int
    round: int
    team1_id: Optional[Hashable] = None
    team2_id: Optional[Hashable] = None
    pool: Optional[int] = None


def bracket_rounds(team_count: int) -> int:
    """Rounds needed to reduce `team_count` entrants to one winner"""
    return math.ceil(math.log2(team_count)) if team_count > 1 else 0


def _empty_rounds(first_round: int, rounds: int, next_number: int) -> List[GeneratedMatch]:
    matches = []
    for offset in range(rounds):
        for _ in range(2 ** (rounds - offset - 1)):
            matches.append(GeneratedMatch(match_number=next_number, round=first_round + offset))
            next_number += 1
    return matches


def generate_bracket(teams: Sequence[SeededTeam]) -> List[GeneratedMatch]:
    if len(teams) < 2:
        raise InvalidInput("A bracket needs at least 2 teams")

    # Unseeded teams follow the seeded ones, in input order
    ordered = sorted(teams, key=lambda t: (t.seed_position is None, t.seed_position or 0))
    rounds = bracket_rounds(len(ordered))
    slots = 2**rounds

    matches = []
    for i in range(slots // 2):
        opponent = slots - 1 - i
        matches.append(
            GeneratedMatch(
                match_number=i + 1,
                round=1,
                team1_id=ordered[i].id,
                team2_id=ordered[opponent].id if opponent < len(ordered) else None,
            )
        )
    matches.extend(_empty_rounds(2, rounds - 1, len(matches) + 1))
    return matches


def generate_round_robin(teams: Sequence[SeededTeam]) -> List[GeneratedMatch]:
    if len(teams) < 2:
        raise InvalidInput("Round robin needs at least 2 teams")

    matches = []
    for i in range(len(teams)):
        for j in range(i + 1, len(teams)):
            matches.append(
                GeneratedMatch(match_number=len(matches) + 1, round=1, team1_id=teams[i].id, team2_id=teams[j].id)
            )
    return matches


def split_into_pools(teams: Sequence[SeededTeam], pool_count: int) -> List[List[SeededTeam]]:
    """Contiguous pools; the first len(teams) % pool_count pools get one extra team"""
    base, extra = divmod(len(teams), pool_count)
    pools: List[List[SeededTeam]] = []
    start = 0
    for index in range(pool_count):
        size = base + (1 if index < extra else 0)
        pools.append(list(teams[start : start + size]))
        start += size
    return pools


def generate_pool_play(teams: Sequence[SeededTeam], pool_count: Optional[int]) -> List[GeneratedMatch]:
    if not pool_count or pool_count < 2:
        raise InvalidInput("Pool play requires at least 2 pools")
    if len(teams) < pool_count * 2:
        raise InvalidInput(f"Pool play with {pool_count} pools needs at least {pool_count * 2} teams")

    matches = []
    for pool_number, pool in enumerate(split_into_pools(teams, pool_count), start=1):
        for i in range(len(pool)):
            for j in range(i + 1, len(pool)):
                matches.append(
                    GeneratedMatch(
                        match_number=len(matches) + 1,
                        round=pool_number,
                        pool=pool_number,
                        team1_id=pool[i].id,
                        team2_id=pool[j].id,
                    )
                )

    last_pool_round = max(m.round for m in matches)
    rounds = bracket_rounds(pool_count * TEAMS_ADVANCING_PER_POOL)
    matches.extend(_empty_rounds(last_pool_round + 1, rounds, len(matches) + 1))
    return matches


def generate_fixtures(
    format: Optional[str], teams: Sequence[SeededTeam], pools: Optional[int] = None
) -> List[GeneratedMatch]:
    """
    Build the fixture list for `format`.

    Raises:
        InvalidInput for an unknown format, no teams, or an impossible pool split
    """
    if format not in GENERATION_FORMATS:
        raise InvalidInput("Invalid tournament format")
    if not teams:
        raise InvalidInput("At least one team is required")

    if format == "bracket":
        return generate_bracket(teams)
    if format == "round-robin":
        return generate_round_robin(teams)
    return generate_pool_play(teams, pools)
