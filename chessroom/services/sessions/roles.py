import random

from chessroom.models import BLACK, EITHER, SPECTATOR, WHITE, opponent

_SIDE_ALIASES = {
    'w': WHITE,
    'white': WHITE,
    'b': BLACK,
    'black': BLACK,
    'r': EITHER,
    'random': EITHER,
    'either': EITHER,
}


def normalize_side(requested):
    """Map a requested side ('w', 'white', 'r', ...) onto white/black/either."""
    if requested is None:
        return EITHER
    return _SIDE_ALIASES.get(str(requested).strip().lower(), EITHER)


def resolve_requested_side(requested, rng=random):
    side = normalize_side(requested)
    if side == EITHER:
        return rng.choice((WHITE, BLACK))
    return side


def assign_join_role(session, sid):
    """Bind ``sid`` to the first free slot of ``session``, else make it a spectator.

    A connection already in the session keeps its role. Returns
    ``(role, occupancy_changed)``.
    """
    side = session.side_of(sid)
    if side is not None:
        return side, False
    if sid in session.spectators:
        return SPECTATOR, False
    for side in (WHITE, BLACK):
        if session.slot(side) is None:
            session.bind(side, sid)
            return side, True
    session.spectators.add(sid)
    return SPECTATOR, False


def can_move(session, sid, side_to_move):
    return sid is not None and session.slot(side_to_move) == sid


def resigning_side(session, sid):
    """Side a resignation from ``sid`` would concede, or None for non-players."""
    return session.side_of(sid)


def draw_offer_target(session, sid):
    """Return ``(offering_side, opponent_sid)`` when ``sid`` may offer a draw."""
    side = session.side_of(sid)
    if side is None:
        return None
    target = session.slot(opponent(side))
    if target is None:
        return None
    return side, target


def can_answer_draw(session, sid):
    """True when ``sid`` is the player a pending draw offer was made to."""
    side = session.side_of(sid)
    return (
        side is not None
        and session.draw_offered_by is not None
        and session.draw_offered_by == opponent(side)
    )
