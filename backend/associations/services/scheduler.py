import threading

from associations import socketio
from associations.engine.timers import ManualScheduler, ScheduledTask


class SocketIOScheduler:
    """Runs engine timers as Socket.IO background tasks.

    One scheduler per game session. Dispatched events and timer firings
    share a re-entrant lock, so they execute one at a time and a task
    cancelled inside a dispatched event can no longer fire.
    """

    def __init__(self, app, game_code: str):
        self.app = app
        self.game_code = game_code
        self.lock = threading.RLock()

    def call_later(self, delay: float, callback) -> ScheduledTask:
        task = ScheduledTask(callback)
        self.app.logger.debug(f"[timer-set] game={self.game_code} delay={delay}s")
        socketio.start_background_task(self._worker, task, delay)
        return task

    def dispatch(self, fn, *args, **kwargs):
        with self.lock:
            return fn(*args, **kwargs)

    def _worker(self, task: ScheduledTask, delay: float):
        socketio.sleep(delay)
        with self.lock:
            if task.cancelled:
                self.app.logger.debug(f"[timer-abort] game={self.game_code} cancelled")
                return
            with self.app.app_context():
                task.fire()


def make_scheduler(app, game_code: str):
    """Pick the scheduler for a new session.

    - TESTING mode uses a ManualScheduler so tests control the clock
    - ENABLE_SCHEDULER_IN_TESTS opts tests back into real timers
    """
    if app.config.get('TESTING') and not app.config.get('ENABLE_SCHEDULER_IN_TESTS'):
        return ManualScheduler()
    return SocketIOScheduler(app, game_code)
