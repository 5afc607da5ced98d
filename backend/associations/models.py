from associations import db
import string
import random


class Player(db.Model):
    __tablename__ = 'player'
    id = db.Column(db.Integer, primary_key=True)
    external_id = db.Column(db.String(64), nullable=False)
    name = db.Column(db.String(64), nullable=False)
    position = db.Column(db.Integer, nullable=False, default=0)
    score = db.Column(db.Integer, default=0)
    team_id = db.Column(db.Integer, db.ForeignKey('team.id'), nullable=False)
    team = db.relationship('Team', back_populates='players')

    def to_dict(self):
        return {
            'id': self.external_id,
            'name': self.name,
            'score': self.score or 0,
        }


class Team(db.Model):
    __tablename__ = 'team'
    id = db.Column(db.Integer, primary_key=True)
    color_id = db.Column(db.String(64), nullable=False)
    position = db.Column(db.Integer, nullable=False, default=0)
    points = db.Column(db.Integer, default=0)
    game_id = db.Column(db.Integer, db.ForeignKey('game.id'), nullable=False)
    game = db.relationship('Game', back_populates='teams')
    players = db.relationship('Player', back_populates='team', order_by='Player.position',
                              cascade='all, delete-orphan')

    def to_dict(self):
        return {
            'colorId': self.color_id,
            'points': self.points or 0,
            'players': [p.to_dict() for p in self.players],
        }


class Word(db.Model):
    __tablename__ = 'word'
    id = db.Column(db.Integer, primary_key=True)
    text = db.Column(db.String(128), nullable=False)
    position = db.Column(db.Integer, nullable=False, default=0)
    game_id = db.Column(db.Integer, db.ForeignKey('game.id'), nullable=False)


def generate_game_code(length=4):
    """Generate a unique, short game code."""
    while True:
        code = ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))
        if not Game.query.filter_by(game_code=code).first():
            return code


class Game(db.Model):
    __tablename__ = 'game'
    id = db.Column(db.Integer, primary_key=True)
    game_code = db.Column(db.String(32), unique=True, index=True)
    players_per_team = db.Column(db.Integer, nullable=False, default=1)
    teams = db.relationship('Team', back_populates='game', order_by='Team.position',
                            cascade='all, delete-orphan')
    words = db.relationship('Word', order_by='Word.position', cascade='all, delete-orphan')

    def __init__(self, **kwargs):
        super(Game, self).__init__(**kwargs)
        if not self.game_code:
            self.game_code = generate_game_code()

    @classmethod
    def from_payload(cls, data):
        """Build a game from an already validated game-data payload."""
        game = cls(game_code=str(data['id']).upper() if data.get('id') else None,
                   players_per_team=int(data['playersPerTeam']))
        for t_pos, raw_team in enumerate(data['teams']):
            team = Team(color_id=str(raw_team.get('colorId', raw_team.get('color', t_pos + 1))),
                        position=t_pos)
            for p_pos, raw_player in enumerate(raw_team['players']):
                name = raw_player['name']
                team.players.append(Player(external_id=str(raw_player.get('id') or name),
                                           name=name, position=p_pos))
            game.teams.append(team)
        for w_pos, text in enumerate(data['words']):
            game.words.append(Word(text=str(text), position=w_pos))
        return game

    def find_player(self, external_id):
        for team in self.teams:
            for player in team.players:
                if player.external_id == str(external_id):
                    return player
        return None

    def to_payload(self):
        """The game-data record the turn engine loads."""
        return {
            'id': self.game_code,
            'playersPerTeam': self.players_per_team,
            'teams': [t.to_dict() for t in self.teams],
            'words': [w.text for w in self.words],
        }

    def leaderboard(self):
        return sorted((t.to_dict() for t in self.teams), key=lambda t: t['points'], reverse=True)
