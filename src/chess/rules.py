"""
Legality and end-of-game rules.
----

moves.py knows how pieces move (candidate / pseudo-legal moves). This module adds what makes a candidate legal:

1. the piece on the starting square belongs to the side to move
2. a pawn reaching the far rank names the piece it promotes into (and no other move names one)
3. the move does not put (or leave) your own king in check. Tested by playing the move on a scratch board.

On top of that it answers the end-of-game questions: is a side in check, does it have any legal move left,
and so: checkmate, stalemate or play on.
"""

from typing import Iterator

from src.chess.board import Board
from src.chess.moves import (
    ATTACK_RULES,
    MOVEMENT_RULES,
    Move,
    is_pawn_move_to_promotion_rank,
)
from src.chess.pieces import PROMOTION_OPTIONS
from src.chess.square import Square
from src.core.shared_types import Color, Status


# --- CHECK DETECTION ---
def is_square_attacked(board: Board, square: Square, by_color: Color) -> bool:
    """Could any piece of `by_color` take on `square`? (pseudo-legal: pins are irrelevant for giving check)"""
    return any(is_attacked(square, by_color, board) for is_attacked in ATTACK_RULES)


def is_in_check(board: Board, color: Color) -> bool:
    """The king of `color` stands on an attacked square. A board without that king is never in check."""
    king_square = board.king_square(color)
    if king_square is None:
        return False
    return is_square_attacked(board, king_square, color.opponent)


def leaves_king_in_check(board: Board, side: Color, move: Move) -> bool:
    """
    Return True if the move puts you in check

    plan:
    1. Copy the board
    2. make the candidate move
    3. determine if king is in check on the new board
    """
    scratch_board = board.copy()
    scratch_board.move_piece(move)
    return is_in_check(scratch_board, side)


# --- MOVE GENERATION ---
def candidate_moves_from(board: Board, square: Square) -> list[Move]:
    """
    Pseudo-legal moves of the piece on `square`, with pawn moves to the far rank expanded into
    one move for every piece type the pawn can promote into.
    """
    piece = board.piece_at(square)
    if piece is None:
        return []

    moves: list[Move] = []
    for move in MOVEMENT_RULES[piece.type](square, board):
        if is_pawn_move_to_promotion_rank(move, board):
            moves.extend(
                Move(move.original, move.new, promotion)
                for promotion in PROMOTION_OPTIONS
            )
        else:
            moves.append(move)
    return moves


def _iter_legal_moves(board: Board, side: Color) -> Iterator[Move]:
    for square, _ in board.pieces_of(side):
        for move in candidate_moves_from(board, square):
            if not leaves_king_in_check(board, side, move):
                yield move


def legal_moves(board: Board, side: Color) -> list[Move]:
    """Every legal move for the side with the `side` pieces"""
    return list(_iter_legal_moves(board, side))


def has_any_legal_move(board: Board, side: Color) -> bool:
    """Stops at the first legal move found. This is the expensive part of detecting the end of a game."""
    return next(_iter_legal_moves(board, side), None) is not None


# --- VALIDATION ---
def is_legal(board: Board, side: Color, move: Move) -> bool:
    """Can `side` play `move` on `board` right now?"""
    if move.original == move.new:
        return False

    piece = board.piece_at(move.original)
    if piece is None or piece.color != side:
        return False

    # a promotion that is missing, not allowed, or attached to a move that does not promote, fails this check
    if move not in candidate_moves_from(board, move.original):
        return False

    return not leaves_king_in_check(board, side, move)


# --- END OF GAME ---
def classify(board: Board, side_to_move: Color) -> Status:
    """
    Status of the game, seen from the side that is about to move.

    NOTE checkmate and stalemate both need the (expensive) search for a legal move, so do that search only once.
    """
    if has_any_legal_move(board, side_to_move):
        return Status.IN_PROGRESS
    if is_in_check(board, side_to_move):
        return Status.CHECKMATE
    return Status.STALEMATE
