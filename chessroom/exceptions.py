"""Errors raised by the coordinator and reported to the acting connection only."""


class CoordinatorError(Exception):
    """Base class for errors a single action can raise."""


class SessionNotFound(CoordinatorError):
    def __init__(self, session_id):
        super().__init__(f"Game not found: {session_id}")
        self.session_id = session_id

    def to_dict(self):
        return {'message': 'Game not found', 'sessionId': self.session_id}


class InvalidMove(CoordinatorError):
    """The rule engine refused the move, or the game is already over."""

    def __init__(self, move, reason='illegal move'):
        super().__init__(f"Invalid move {move!r}: {reason}")
        self.move = move
        self.reason = reason
