"""
Domain errors shared by services and routes.

InvalidInput maps to HTTP 400 and PersistenceError to HTTP 500
(see the exception handlers registered in league_admin.main).
Scheduling conflicts are not errors: they are returned as data.
"""


class LeagueAdminError(Exception):
    """Base exception for league admin domain errors"""
    pass


class InvalidInput(LeagueAdminError):
    """Malformed or missing required input"""
    pass


class PersistenceError(LeagueAdminError):
    """The database rejected or failed a write/read"""
    pass
