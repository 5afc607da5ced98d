from flask import Blueprint, jsonify, request, current_app
from sqlalchemy.exc import SQLAlchemyError
from associations import db
from associations.engine import GameData, GameDataError, ScoreCommitError
from associations.models import Game, generate_game_code
from associations.services import sessions
from associations.services.scoring import commit_score


games = Blueprint('games', __name__)


@games.route('', methods=['POST'])
def store_game_data():
    """
    Stores the game-data record (teams, words, players per team) for a game.
    A host session already waiting on this game loads it straight away.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'A JSON game-data object is required'}), 400
    code = str(data.get('id') or generate_game_code()).upper()
    try:
        GameData.from_payload(dict(data, id=code))
    except GameDataError as exc:
        return jsonify({'error': str(exc)}), 400

    if Game.query.filter_by(game_code=code).first():
        return jsonify({'error': f'Game {code} already exists'}), 409

    game = Game.from_payload(dict(data, id=code))
    db.session.add(game)
    try:
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.error(f"[game-store-failed] game={code} error={exc}")
        return jsonify({'error': 'Could not store game data'}), 500

    current_app.logger.info(f"[game-stored] game={code} teams={len(game.teams)} words={len(game.words)}")
    sessions.supply_game_data(code)
    return jsonify({
        'message': 'Game data stored',
        'game_code': code
    }), 201


@games.route('/<string:game_code>', methods=['GET'])
def get_game_data(game_code):
    game = Game.query.filter_by(game_code=game_code.upper()).first_or_404()
    return jsonify(game.to_payload())


@games.route('/<string:game_code>/leaderboard', methods=['GET'])
def get_leaderboard(game_code):
    game = Game.query.filter_by(game_code=game_code.upper()).first_or_404()
    return jsonify({'game_code': game.game_code, 'teams': game.leaderboard()})


@games.route('/<string:game_code>/score', methods=['POST'])
def post_score(game_code):
    """
    Records one guessed word for a player (playerId in the query string or body).
    """
    body = request.get_json(silent=True) or {}
    player_id = request.args.get('playerId') or body.get('playerId')
    if not player_id:
        return jsonify({'error': 'playerId is required'}), 400
    try:
        teams = commit_score(game_code, player_id)
    except ScoreCommitError as exc:
        current_app.logger.warning(f"[score-commit-failed] game={game_code.upper()} player={player_id} error={exc}")
        return jsonify({'error': str(exc)}), 400
    sessions.broadcast_scores(game_code, teams)
    return jsonify({'game_code': game_code.upper(), 'teams': teams})


@games.route('/<string:game_code>/state', methods=['GET'])
def get_turn_state(game_code):
    """
    Public turn snapshot. Never includes the secret word.
    """
    session = sessions.get_session(game_code)
    if session is None:
        return jsonify({'error': 'No live session for this game'}), 404
    return jsonify(session.to_dict(reveal_word=False))
