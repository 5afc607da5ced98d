from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)

DEMO_GAME = {
    'id': 'DEMO',
    'playersPerTeam': 2,
    'teams': [
        {'colorId': 'green', 'players': [{'name': 'Ana', 'id': 'ana'}, {'name': 'Boris', 'id': 'boris'}]},
        {'colorId': 'blue', 'players': [{'name': 'Vera', 'id': 'vera'}, {'name': 'Georgi', 'id': 'georgi'}]},
    ],
    'words': ['lighthouse', 'avalanche', 'violin', 'passport', 'volcano', 'umbrella'],
}

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from associations.main import main
    flask_app.register_blueprint(main)

    from associations.api.games import games
    flask_app.register_blueprint(games, url_prefix='/api/games')

    # Importing here ensures the handlers bind to the initialized socketio instance
    from associations.socketio_events import register_socketio_handlers
    register_socketio_handlers(flask_app, testing=flask_app.config.get('TESTING', False))

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database with a demo game."""
        from associations.models import Game
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            db.session.add(Game.from_payload(DEMO_GAME))
            db.session.commit()
            print(f"Database has been reset and seeded with game {DEMO_GAME['id']}!")

    flask_app.cli.add_command(db_reset_command)

    return flask_app
