class SessionError(Exception):
    """Base class for turn engine errors."""


class GameDataError(SessionError):
    """The game-data payload is missing or malformed."""


class InvalidTransition(SessionError):
    """A command arrived in a phase that does not accept it."""


class ScoreCommitError(SessionError):
    """A score commit could not be delivered to its collaborator."""
