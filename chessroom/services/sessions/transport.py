"""Socket.IO side of the coordinator: addressed sends, room broadcasts, room joins.

Delivery is best effort. A failed emit is logged and dropped so that one
vanished connection never interrupts the action being processed.
"""
import logging


class SocketIOTransport:
    """Bound to the python-socketio server created for one Flask app.

    Holding the server (not the Flask-SocketIO wrapper) keeps late timers
    of a discarded app from reaching clients of a newer one.
    """

    def __init__(self, server, namespace='/ws', logger=None):
        self.server = server
        self.namespace = namespace
        self.logger = logger or logging.getLogger(__name__)

    def send(self, sid, event, payload=None):
        self._emit(event, payload, to=sid)

    def broadcast(self, room, event, payload=None):
        self._emit(event, payload, to=room)

    def broadcast_all(self, event, payload=None):
        self._emit(event, payload)

    def join(self, sid, room):
        try:
            self.server.enter_room(sid, room, namespace=self.namespace)
        except Exception as exc:
            self.logger.warning(f"[transport-join-failed] sid={sid} room={room}: {exc}")

    def _emit(self, event, payload, to=None):
        try:
            self.server.emit(event, payload, to=to, namespace=self.namespace)
        except Exception as exc:
            self.logger.warning(f"[transport-emit-failed] event={event} to={to}: {exc}")
