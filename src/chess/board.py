"""The Board only stores the `position` (in chess: the configuration of pieces on the board). No rules live here."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Self

from src.chess.pieces import Piece
from src.chess.square import BOARD_DIMENSIONS, Square, all_squares
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, PieceType

if TYPE_CHECKING:
    from src.chess.moves import Move

STARTING_POSITION = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
EMPTY_POSITION = "/".join(["8"] * BOARD_DIMENSIONS[1])


@dataclass
class Board:
    position: dict[Square, Optional[Piece]]

    @classmethod
    def empty(cls) -> Self:
        return cls({square: None for square in all_squares()})

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_POSITION)

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the piece placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank, starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank are the white pieces. Again, left-to-right reads a1-h1.
        """
        board = cls.empty()
        fen_by_ranks = fen_str.split("/")
        if len(fen_by_ranks) != BOARD_DIMENSIONS[1]:
            raise InvalidRequestError(
                f"Board encoding needs {BOARD_DIMENSIONS[1]} ranks, got {len(fen_by_ranks)}: {fen_str!r}"
            )
        for rank_idx, fen_one_rank in enumerate(fen_by_ranks):
            # FEN string is read from top rank (8th) to bottom rank (1st)
            rank = BOARD_DIMENSIONS[1] - 1 - rank_idx
            # ... but the first character is the a-file, so reads in normal direction
            file = 0
            for character in fen_one_rank:
                if character.isdigit():
                    # A number denotes the amount of empty squares after each other
                    file += int(character)
                    continue
                square = Square(file, rank)
                if not square.is_within_bounds() or character.lower() not in "pnbrqk":
                    raise InvalidRequestError(f"Cannot read rank {fen_one_rank!r} in {fen_str!r}")
                board.place(square, Piece.from_fen(character))
                file += 1
            if file != BOARD_DIMENSIONS[0]:
                raise InvalidRequestError(f"Rank {fen_one_rank!r} does not cover {BOARD_DIMENSIONS[0]} files")
        return board

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(
            self._rank_to_fen(rank) for rank in range(BOARD_DIMENSIONS[1] - 1, -1, -1)
        )

    def _rank_to_fen(self, rank: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for file in range(BOARD_DIMENSIONS[0]):
            piece = self.piece_at(Square(file, rank))

            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    # --- ACCESSORS ---
    def piece_at(self, square: Square) -> Optional[Piece]:
        return self.position[square]

    def is_empty(self, square: Square) -> bool:
        return self.position[square] is None

    def place(self, square: Square, piece: Piece) -> None:
        self.position[square] = piece

    def remove(self, square: Square) -> Optional[Piece]:
        piece = self.position[square]
        self.position[square] = None
        return piece

    def pieces_of(self, color: Color) -> list[tuple[Square, Piece]]:
        return [
            (square, piece)
            for square, piece in self.position.items()
            if piece is not None and piece.color == color
        ]

    def king_square(self, color: Color) -> Optional[Square]:
        """Where the king of the given color stands. None only on hand-made test boards."""
        return next(
            (
                square
                for square, piece in self.pieces_of(color)
                if piece.type == PieceType.KING
            ),
            None,
        )

    # --- UPDATES ---
    def move_piece(self, move: "Move") -> Optional[Piece]:
        """Update the position on the board. Returns the captured piece, if any."""
        piece_that_moved = self.remove(move.original)
        if piece_that_moved is None:
            raise ValueError(f"No piece on {move.original} to move.")
        if move.promotion is not None:
            piece_that_moved = piece_that_moved.promoted_to(move.promotion)
        captured = self.piece_at(move.new)
        self.place(move.new, piece_that_moved)
        return captured

    def copy(self) -> Self:
        """Scratch board for trying out a move. Pieces are immutable, so copying the mapping is enough."""
        return type(self)(dict(self.position))
