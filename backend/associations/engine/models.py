from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .errors import GameDataError


@dataclass(frozen=True)
class Player:
    name: str
    id: str

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'id': self.id}


@dataclass(frozen=True)
class Team:
    color_id: str
    players: Tuple[Player, ...]


@dataclass(frozen=True)
class Contestant:
    """A player in their turn-taking role, annotated with team context."""

    name: str
    id: str
    team_index: int  # 1-based
    team_color_id: str
    team: Team = field(repr=False, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'id': self.id,
            'team_index': self.team_index,
            'team_color_id': self.team_color_id,
        }


@dataclass(frozen=True)
class GameData:
    id: str
    teams: Tuple[Team, ...]
    words: Tuple[str, ...]
    players_per_team: int

    @classmethod
    def from_payload(cls, payload: Optional[Dict[str, Any]]) -> 'GameData':
        """Parse the game-data record supplied by the game-data collaborator.

        Accepts ``colorId`` or the legacy ``color`` key for teams, and falls
        back to the player name when a player has no ``id``. Raises
        ``GameDataError`` for anything the turn engine cannot run with.
        """
        if not isinstance(payload, dict):
            raise GameDataError('game data is missing')
        game_id = payload.get('id')
        if game_id is None or str(game_id) == '':
            raise GameDataError('game data has no id')

        raw_teams = payload.get('teams')
        if not isinstance(raw_teams, list) or not raw_teams:
            raise GameDataError('game data has no teams')
        teams = []
        for idx, raw_team in enumerate(raw_teams):
            if not isinstance(raw_team, dict):
                raise GameDataError(f'team {idx} is not an object')
            color_id = raw_team.get('colorId', raw_team.get('color'))
            raw_players = raw_team.get('players')
            if not isinstance(raw_players, list) or not raw_players:
                raise GameDataError(f'team {idx} has no players')
            players = []
            for raw_player in raw_players:
                name = raw_player.get('name') if isinstance(raw_player, dict) else None
                if not name:
                    raise GameDataError(f'team {idx} has a player without a name')
                player_id = raw_player.get('id')
                players.append(Player(name=name, id=str(player_id) if player_id is not None else name))
            teams.append(Team(color_id=str(color_id) if color_id is not None else str(idx + 1),
                              players=tuple(players)))

        raw_words = payload.get('words')
        if not isinstance(raw_words, list) or not raw_words:
            raise GameDataError('game data has no words')
        words = tuple(str(w) for w in raw_words)

        try:
            players_per_team = int(payload.get('playersPerTeam'))
        except (TypeError, ValueError):
            raise GameDataError('playersPerTeam must be an integer') from None
        if players_per_team < 1:
            raise GameDataError('playersPerTeam must be at least 1')

        return cls(id=str(game_id), teams=tuple(teams), words=words,
                   players_per_team=players_per_team)


@dataclass(frozen=True)
class ScoreCommit:
    game_id: str
    contestant_id: str

    def to_dict(self) -> Dict[str, Any]:
        return {'gameId': self.game_id, 'contestantId': self.contestant_id}


@dataclass(frozen=True)
class LeaveEvent:
    game_id: str
    player_id: str
    player_name: str
    timestamp: str  # ISO 8601, UTC

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': 'player_leave',
            'gameId': self.game_id,
            'playerId': self.player_id,
            'playerName': self.player_name,
            'timestamp': self.timestamp,
        }
