"""
Services Layer

- conflict_detector: pure slot-collision check over assignment candidates
- membership_reconciler: set-difference sync of owner -> member link tables
- schedule_assignment: validates, checks and persists a placement batch

Services raise league_admin.errors exceptions, never HTTPException.
"""
