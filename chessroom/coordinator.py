"""Authoritative game-session coordinator.

All mutation of the registry and its sessions goes through one re-entrant
lock, so an action on a session is applied in full before the next one
starts. Errors that belong to the acting connection (unknown session,
rejected move) are raised; the socket handlers turn them into caller-only
events. Actions by connections without the needed role are dropped
silently so turn and role information never leaks.
"""
import logging
import threading

from chessroom.exceptions import InvalidMove, SessionNotFound
from chessroom.lobby import LobbyFeed
from chessroom.models import BLACK, CHECKMATE, DRAW, RESIGNATION, SPECTATOR, WHITE, opponent
from chessroom.services.sessions import roles
from chessroom.services.sessions.rules import ONGOING


class Coordinator:
    def __init__(self, registry, rules, transport, scheduler, grace_period=60.0, logger=None):
        self.registry = registry
        self.rules = rules
        self.transport = transport
        self.scheduler = scheduler
        self.grace_period = float(grace_period)
        self.logger = logger or logging.getLogger(__name__)
        self.lobby = LobbyFeed(registry, transport)
        self._lock = threading.RLock()

    # ---- lookups ----

    def _require(self, session_id):
        session = self.registry.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def lobby_snapshot(self):
        with self._lock:
            return self.lobby.snapshot()

    def describe(self, session_id):
        with self._lock:
            session = self._require(session_id)
            return {'id': session.id, 'name': session.name, 'state': self.snapshot(session)}

    def snapshot(self, session, disconnected=None):
        return {
            'sessionId': session.id,
            'position': self.rules.encode(session.position),
            'moveLog': list(session.move_log),
            'whiteLabel': session.label_for(WHITE, disconnected),
            'blackLabel': session.label_for(BLACK, disconnected),
            'turn': self.rules.side_to_move(session.position),
            'status': session.status,
            'result': dict(session.outcome) if session.outcome else None,
        }

    # ---- lobby ----

    def handle_list_request(self, sid):
        with self._lock:
            self.lobby.send_to(sid)

    def handle_create(self, sid, name, side=None):
        with self._lock:
            session_id = self.registry.create(name, side, creator_sid=sid)
            session = self.registry.get(session_id)
            role = session.side_of(sid)
            self.logger.info(f"[session-create] session={session_id} name={session.name!r} side={role} sid={sid}")
            self.transport.join(sid, session_id)
            self.transport.send(sid, 'playerRole', role)
            self.transport.send(sid, 'gameCreated', {'sessionId': session_id})
            self.lobby.republish_to_all()
            return session_id

    def handle_join_request(self, sid, session_id, announce=True):
        """Grant ``sid`` a role in the session and send it the full state.

        ``announce`` adds the ``gameJoined`` acknowledgement used by the
        lobby; rejoining from the game page skips it.
        """
        with self._lock:
            session = self._require(session_id)
            role, changed = roles.assign_join_role(session, sid)
            self.logger.info(f"[session-join] session={session.id} sid={sid} role={role} changed={changed}")
            self.transport.join(sid, session.id)
            if role == SPECTATOR:
                self.transport.send(sid, 'spectatorRole')
            else:
                self.transport.send(sid, 'playerRole', role)
            self.transport.send(sid, 'gameState', self.snapshot(session))
            if announce:
                self.transport.send(sid, 'gameJoined', {'sessionId': session.id})
            if changed:
                self.lobby.republish_to_all()
            return role

    # ---- play ----

    def handle_move(self, sid, session_id, move):
        """Apply a move for the side to move. Returns True when applied."""
        with self._lock:
            session = self._require(session_id)
            side = self.rules.side_to_move(session.position)
            if not roles.can_move(session, sid, side):
                self.logger.debug(f"[move-ignored] session={session.id} sid={sid} not {side} to move")
                return False
            if session.is_finished:
                raise InvalidMove(move, 'game is over')
            try:
                position, record = self.rules.apply_move(session.position, move)
            except InvalidMove:
                self.logger.info(f"[move-rejected] session={session.id} side={side} move={move}")
                raise

            session.record_move(position, record)
            session.draw_offered_by = None
            self.logger.info(f"[move] session={session.id} ply={len(session.move_log)} san={record['san']}")
            self.transport.broadcast(session.id, 'gameState', self.snapshot(session))

            status = self.rules.status(position)
            if status != ONGOING:
                # The side that just moved delivered mate
                self._finish(session, status, side if status == CHECKMATE else None)
            return True

    def handle_resign(self, sid, session_id):
        with self._lock:
            session = self._require(session_id)
            side = roles.resigning_side(session, sid)
            if side is None or session.is_finished:
                return False
            self._finish(session, RESIGNATION, opponent(side))
            return True

    def handle_draw_offer(self, sid, session_id):
        with self._lock:
            session = self._require(session_id)
            target = roles.draw_offer_target(session, sid)
            if target is None or session.is_finished:
                return False
            side, opponent_sid = target
            session.draw_offered_by = side
            self.logger.info(f"[draw-offer] session={session.id} by={side}")
            self.transport.send(opponent_sid, 'drawOffered', {'sessionId': session.id})
            return True

    def handle_draw_accept(self, sid, session_id):
        with self._lock:
            session = self._require(session_id)
            if session.is_finished or not roles.can_answer_draw(session, sid):
                return False
            self._finish(session, DRAW, None)
            return True

    def handle_draw_decline(self, sid, session_id):
        with self._lock:
            session = self._require(session_id)
            if session.is_finished or not roles.can_answer_draw(session, sid):
                return False
            offering_sid = session.slot(session.draw_offered_by)
            session.draw_offered_by = None
            self.transport.send(offering_sid, 'drawDeclined', {'sessionId': session.id})
            return True

    def _finish(self, session, result, winner):
        session.finish(result, winner)
        self.logger.info(f"[game-over] session={session.id} result={result} winner={winner}")
        self.transport.broadcast(session.id, 'gameOver', {'result': result, 'winner': winner})

    # ---- connection loss and cleanup ----

    def handle_disconnect(self, sid):
        """Vacate every slot and spectator seat held by ``sid``."""
        with self._lock:
            emptied = []
            for session in self.registry.sessions_with(sid):
                side = session.side_of(sid)
                if side is not None:
                    session.unbind(side)
                    self.logger.info(f"[player-left] session={session.id} side={side} sid={sid}")
                    self.transport.broadcast(session.id, 'gameState', self.snapshot(session, disconnected=side))
                else:
                    session.spectators.discard(sid)
                if session.is_abandoned:
                    emptied.append(session.id)
            for session_id in emptied:
                self.schedule_sweep(session_id)
            self.lobby.republish_to_all()

    def schedule_sweep(self, session_id):
        """Arrange for ``session_id`` to be re-checked after the grace period."""
        self.logger.info(f"[sweep-scheduled] session={session_id} delay={self.grace_period}s")
        self.scheduler.call_later(self.grace_period, self.sweep_abandoned, session_id)

    def sweep_abandoned(self, session_id):
        """Delete the session if it still exists and is still empty."""
        with self._lock:
            session = self.registry.get(session_id)
            if session is None or not session.is_abandoned:
                self.logger.info(f"[sweep-skip] session={session_id} gone or reoccupied")
                return False
            self.registry.delete(session_id)
            self.logger.info(f"[sweep-delete] session={session_id}")
            self.lobby.republish_to_all()
            return True
