"""Transport-side services: scheduling, score commits and live sessions.

These modules bind the pure turn engine in ``associations.engine`` to
Socket.IO and the database. HTTP routes and socket handlers import from
here rather than reaching into the engine's collaborators directly.
"""
