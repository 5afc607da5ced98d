"""Turn engine for Associations: rotation, timers, word pool and reveal.

This package is pure game mechanics. It knows nothing about Flask, the
database or Socket.IO; HTTP routes and socket handlers drive it through
``GameSession`` and receive its output through ``SessionEvents``.
"""

from .errors import GameDataError, InvalidTransition, ScoreCommitError, SessionError
from .models import Contestant, GameData, LeaveEvent, Player, ScoreCommit, Team
from .session import GameSession, Phase, SessionEvents
from .timers import ManualScheduler, TimerSlot

__all__ = [
    'Contestant',
    'GameData',
    'GameDataError',
    'GameSession',
    'InvalidTransition',
    'LeaveEvent',
    'ManualScheduler',
    'Phase',
    'Player',
    'ScoreCommit',
    'ScoreCommitError',
    'SessionError',
    'SessionEvents',
    'Team',
    'TimerSlot',
]
