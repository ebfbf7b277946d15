from league_admin.models.attendance import Attendance
from league_admin.models.coach import Coach
from league_admin.models.field import PlayingField
from league_admin.models.match import Match
from league_admin.models.membership import ProgramCoach, ProgramPlayer, SessionCoach, TeamMember
from league_admin.models.player import Player
from league_admin.models.program import Program
from league_admin.models.team import Team
from league_admin.models.tournament import Tournament
from league_admin.models.training_session import TrainingSession

__all__ = [
    "Tournament",
    "PlayingField",
    "Team",
    "TeamMember",
    "Match",
    "Player",
    "Coach",
    "Program",
    "ProgramCoach",
    "ProgramPlayer",
    "TrainingSession",
    "SessionCoach",
    "Attendance",
]
