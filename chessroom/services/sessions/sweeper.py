"""Deferred work for the abandonment sweep."""


class BackgroundScheduler:
    """Run ``func(*args)`` after ``delay`` seconds on a Socket.IO background task.

    Uses the server's own sleep so it cooperates with eventlet/gevent.
    """

    def __init__(self, socketio):
        self.socketio = socketio

    def call_later(self, delay, func, *args):
        def _runner():
            if delay > 0:
                self.socketio.sleep(delay)
            func(*args)

        return self.socketio.start_background_task(_runner)
