"""Rule engine adapter backed by python-chess.

Positions handed to the coordinator are ``chess.Board`` instances and are
treated as opaque values: every accepted move produces a new board, the
previous one is never mutated. Keeping the board (not just a FEN) lets
threefold repetition be detected.
"""
from typing import Any, Dict, Iterable, Optional, Tuple

import chess

from chessroom.exceptions import InvalidMove
from chessroom.models import BLACK, CHECKMATE, DRAW, STALEMATE, WHITE

ONGOING = 'ongoing'

PROMOTIONS = {
    'q': chess.QUEEN,
    'r': chess.ROOK,
    'b': chess.BISHOP,
    'n': chess.KNIGHT,
}


def _side(color: bool) -> str:
    return WHITE if color == chess.WHITE else BLACK


class ChessRules:
    def starting_position(self) -> chess.Board:
        return chess.Board()

    def encode(self, position: chess.Board) -> str:
        return position.fen()

    def side_to_move(self, position: chess.Board) -> str:
        return _side(position.turn)

    def parse_move(self, position: chess.Board, move: Dict[str, Any]) -> chess.Move:
        try:
            from_square = chess.parse_square(str(move['from']).lower())
            to_square = chess.parse_square(str(move['to']).lower())
        except (KeyError, TypeError, ValueError):
            raise InvalidMove(move, 'unknown square')

        promotion = move.get('promotion')
        promotion_piece = None
        if promotion:
            promotion_piece = PROMOTIONS.get(str(promotion).lower())
            if promotion_piece is None:
                raise InvalidMove(move, 'unknown promotion piece')
        elif self._is_promotion_push(position, from_square, to_square):
            # Clients that omit the piece get a queen
            promotion_piece = chess.QUEEN

        candidate = chess.Move(from_square, to_square, promotion=promotion_piece)
        if candidate.promotion and not self._is_promotion_push(position, from_square, to_square):
            # A promotion letter on an ordinary move is ignored
            candidate = chess.Move(from_square, to_square)
        return candidate

    def _is_promotion_push(self, position: chess.Board, from_square: int, to_square: int) -> bool:
        piece = position.piece_at(from_square)
        if piece is None or piece.piece_type != chess.PAWN:
            return False
        return chess.square_rank(to_square) in (0, 7)

    def apply_move(self, position: chess.Board, move: Dict[str, Any]) -> Tuple[chess.Board, Dict[str, Any]]:
        """Apply ``move`` ({from, to, promotion?}) to ``position``.

        Returns the new position and a normalized move record. Raises
        InvalidMove when the move is malformed or illegal.
        """
        candidate = self.parse_move(position, move)
        if candidate not in position.legal_moves:
            raise InvalidMove(move)

        record = self._describe(position, candidate)
        board = position.copy()
        board.push(candidate)
        record['after'] = board.fen()
        return board, record

    def _describe(self, board: chess.Board, move: chess.Move) -> Dict[str, Any]:
        piece = board.piece_at(move.from_square)
        record = {
            'color': _side(board.turn),
            'from': chess.square_name(move.from_square),
            'to': chess.square_name(move.to_square),
            'piece': chess.piece_symbol(piece.piece_type),
            'san': board.san(move),
            'lan': move.uci(),
            'before': board.fen(),
        }
        if board.is_en_passant(move):
            record['captured'] = 'p'
        else:
            captured = board.piece_at(move.to_square)
            if captured is not None and captured.color != piece.color:
                record['captured'] = chess.piece_symbol(captured.piece_type)
        if move.promotion:
            record['promotion'] = chess.piece_symbol(move.promotion)
        return record

    def status(self, position: chess.Board) -> str:
        if position.is_checkmate():
            return CHECKMATE
        if position.is_stalemate():
            return STALEMATE
        if (
            position.is_insufficient_material()
            or position.halfmove_clock >= 100
            or position.is_repetition(3)
        ):
            return DRAW
        return ONGOING

    def replay(self, move_log: Iterable[Dict[str, Any]], start: Optional[chess.Board] = None) -> chess.Board:
        """Rebuild a position by applying every logged move from the start."""
        position = start if start is not None else self.starting_position()
        for record in move_log:
            position, _ = self.apply_move(position, record)
        return position
