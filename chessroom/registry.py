import random

from chessroom.models import DEFAULT_SESSION_NAME, Session, generate_session_id
from chessroom.services.sessions.roles import resolve_requested_side


class SessionRegistry:
    """In-memory map of session id to Session.

    Not synchronized on its own; the coordinator serializes every access.
    """

    def __init__(self, rules, rng=None):
        self.rules = rules
        self._rng = rng or random.Random()
        self._sessions = {}

    def create(self, name, requested_side=None, creator_sid=None):
        """Create a session at the starting position and return its id.

        The creator is bound to the requested side, or to a random one when
        the request is 'either'.
        """
        session = Session(
            name=str(name or '').strip() or DEFAULT_SESSION_NAME,
            position=self.rules.starting_position(),
        )
        while session.id in self._sessions:
            session.id = generate_session_id()
        if creator_sid is not None:
            session.bind(resolve_requested_side(requested_side, self._rng), creator_sid)
        self._sessions[session.id] = session
        return session.id

    def get(self, session_id):
        if session_id is None:
            return None
        return self._sessions.get(session_id)

    def delete(self, session_id):
        self._sessions.pop(session_id, None)

    def list(self):
        """Lobby rows, most recently created first."""
        return [session.to_lobby_dict() for session in reversed(list(self._sessions.values()))]

    def sessions_with(self, sid):
        return [session for session in self._sessions.values() if session.contains(sid)]

    def __contains__(self, session_id):
        return session_id in self._sessions

    def __len__(self):
        return len(self._sessions)
