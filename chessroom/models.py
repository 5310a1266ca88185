import uuid

WHITE = 'white'
BLACK = 'black'
SPECTATOR = 'spectator'
EITHER = 'either'

# Session states
WAITING = 'waiting'
ACTIVE = 'active'
FINISHED = 'finished'

# Terminal results
CHECKMATE = 'checkmate'
STALEMATE = 'stalemate'
DRAW = 'draw'
RESIGNATION = 'resignation'

DEFAULT_SESSION_NAME = 'Chess Game'
SLOT_LABELS = {WHITE: 'Player 1', BLACK: 'Player 2'}
WAITING_LABEL = 'Waiting...'
DISCONNECTED_LABEL = 'Disconnected'


def generate_session_id():
    """Generate an unguessable session id (122 random bits)."""
    return str(uuid.uuid4())


def opponent(side):
    return BLACK if side == WHITE else WHITE


class Session:
    """One game: its position, the two player slots, spectators and move log.

    A connection id sits in at most one of the slots or the spectator set.
    ``position`` is opaque here; only the rule engine reads it.
    """

    def __init__(self, name, position, session_id=None):
        self.id = session_id or generate_session_id()
        self.name = name
        self.position = position
        self.move_log = []
        self.player_white = None
        self.player_black = None
        self.spectators = set()
        self.outcome = None
        self.draw_offered_by = None

    def slot(self, side):
        return self.player_white if side == WHITE else self.player_black

    def bind(self, side, sid):
        current = self.slot(side)
        if current is not None and current != sid:
            raise ValueError(f"{side} slot of session {self.id} is already taken")
        self.spectators.discard(sid)
        if side == WHITE:
            self.player_white = sid
        else:
            self.player_black = sid

    def unbind(self, side):
        if side == WHITE:
            self.player_white = None
        else:
            self.player_black = None
        self.draw_offered_by = None

    def side_of(self, sid):
        if sid is None:
            return None
        if self.player_white == sid:
            return WHITE
        if self.player_black == sid:
            return BLACK
        return None

    def contains(self, sid):
        return self.side_of(sid) is not None or sid in self.spectators

    def record_move(self, position, record):
        self.position = position
        self.move_log.append(record)

    def finish(self, result, winner=None):
        self.outcome = {'result': result, 'winner': winner}
        self.draw_offered_by = None

    @property
    def is_abandoned(self):
        return self.player_white is None and self.player_black is None and not self.spectators

    @property
    def is_finished(self):
        return self.outcome is not None

    @property
    def status(self):
        if self.outcome is not None:
            return FINISHED
        if self.player_white is not None and self.player_black is not None:
            return ACTIVE
        return WAITING

    def label_for(self, side, disconnected=None):
        if side == disconnected:
            return DISCONNECTED_LABEL
        return SLOT_LABELS[side] if self.slot(side) is not None else WAITING_LABEL

    def to_lobby_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'whiteOccupied': self.player_white is not None,
            'blackOccupied': self.player_black is not None,
        }

    def __repr__(self):
        return f"<Session {self.id} {self.name!r} {self.status}>"
