from sqlalchemy.exc import SQLAlchemyError

from associations import db
from associations.engine import ScoreCommitError
from associations.models import Game


def commit_score(game_code: str, player_id: str) -> list:
    """Record one guessed word for a player and return the updated teams.

    +1 to the player and +1 to their team. Raises ScoreCommitError when the
    game or player is unknown or the database fails at any step; the
    transaction is rolled back in that case.
    """
    try:
        game = Game.query.filter_by(game_code=str(game_code).upper()).first()
        if not game:
            raise ScoreCommitError(f'unknown game {game_code}')
        player = game.find_player(player_id)
        if not player:
            raise ScoreCommitError(f'unknown player {player_id} in game {game.game_code}')
        player.score = (player.score or 0) + 1
        player.team.points = (player.team.points or 0) + 1
        db.session.add(player)
        db.session.add(player.team)
        db.session.commit()
        return [t.to_dict() for t in game.teams]
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise ScoreCommitError(f'could not store score: {exc}') from exc
