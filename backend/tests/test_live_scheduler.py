from associations import socketio
from associations.engine import ManualScheduler
from associations.services import sessions
from associations.services.scheduler import SocketIOScheduler, make_scheduler


def _host(app, code='ABCD'):
    host = socketio.test_client(app, namespace='/ws')
    host.emit('join_game', {'game_code': code, 'is_host': True, 'player_name': 'green-0'}, namespace='/ws')
    return host


def test_make_scheduler_honours_testing_switch(live_app):
    assert isinstance(make_scheduler(live_app, 'ABCD'), SocketIOScheduler)
    live_app.config['ENABLE_SCHEDULER_IN_TESTS'] = False
    assert isinstance(make_scheduler(live_app, 'ABCD'), ManualScheduler)


def test_cancelled_task_never_fires(live_app):
    scheduler = SocketIOScheduler(live_app, 'ABCD')
    fired = []
    dropped = scheduler.call_later(0.05, lambda: fired.append('dropped'))
    scheduler.call_later(0.05, lambda: fired.append('kept'))
    scheduler.dispatch(dropped.cancel)
    socketio.sleep(0.3)
    assert fired == ['kept']


def test_timer_waits_for_running_event(live_app):
    scheduler = SocketIOScheduler(live_app, 'ABCD')
    order = []

    def slow_event():
        order.append('event-start')
        socketio.sleep(0.2)
        order.append('event-end')

    scheduler.call_later(0.05, lambda: order.append('timer'))
    scheduler.dispatch(slow_event)
    socketio.sleep(0.2)
    assert order == ['event-start', 'event-end', 'timer']


def test_real_countdown_and_reveal(live_app, payload_factory):
    live_app.test_client().post('/api/games', json=payload_factory())
    host = _host(live_app)
    host.emit('start_turn', namespace='/ws')
    session = sessions.get_session('ABCD')
    assert isinstance(session.scheduler, SocketIOScheduler)
    assert session.word_visible

    socketio.sleep(1.5)
    assert session.time_left == 59
    assert not session.word_visible
    states = [p['args'][0] for p in host.get_received('/ws') if p['name'] == 'turn_state']
    assert any(s['time_left'] == 59 for s in states)

    host.emit('hold_start', namespace='/ws')
    socketio.sleep(0.4)
    assert session.word_visible
    host.emit('hold_end', namespace='/ws')
    assert not session.word_visible

    sessions.end_session('ABCD')
    frozen = session.time_left
    host.get_received('/ws')
    socketio.sleep(1.3)
    assert session.time_left == frozen
    assert not [p for p in host.get_received('/ws') if p['name'] == 'turn_state']
    host.disconnect(namespace='/ws')


def test_host_reconnecting_within_grace_keeps_session(live_app, payload_factory):
    live_app.test_client().post('/api/games', json=payload_factory())
    host = _host(live_app)
    session = sessions.get_session('ABCD')
    host.disconnect(namespace='/ws')

    again = _host(live_app)
    socketio.sleep(0.6)
    assert sessions.get_session('ABCD') is session
    assert not session.closed
    again.disconnect(namespace='/ws')


def test_host_not_returning_ends_session(live_app, payload_factory):
    live_app.test_client().post('/api/games', json=payload_factory())
    host = _host(live_app)
    session = sessions.get_session('ABCD')
    host.disconnect(namespace='/ws')
    assert sessions.get_session('ABCD') is session

    socketio.sleep(0.6)
    assert sessions.get_session('ABCD') is None
    assert session.closed
