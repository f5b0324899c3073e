"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

from src.core.exceptions import OutOfRangeError

# Chess board is always 8x8. Just in case we want to try some funky stuff, make it adjustable
BOARD_DIMENSIONS = (8, 8)


@dataclass(frozen=True)
class Square:
    """
    Zero-based coordinate: file 0 is the a-file, rank 0 is the first rank (White's back rank).
    So Square(0, 0) is a1 and Square(7, 7) is h8.
    """

    file: int
    rank: int

    @classmethod
    def from_coordinate(cls, coordinate: tuple[int, int]) -> Square:
        """(x, y) as it arrives in a request. Refuses anything off the board instead of clamping."""
        square = cls(*coordinate)
        if not square.is_within_bounds():
            raise OutOfRangeError(
                f"Coordinate {tuple(coordinate)} is not on the board. Both values must lie in 0..{BOARD_DIMENSIONS[0] - 1}."
            )
        return square

    def to_coordinate(self) -> tuple[int, int]:
        return (self.file, self.rank)

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a1' - 'h8' get converted to (0,0) - (7,7)"""
        file = ord(sq[0]) - ord("a")
        rank = int(sq[1]) - 1
        return cls(file, rank)

    def to_algebraic(self) -> str:
        return f"{chr(self.file + ord('a'))}{self.rank + 1}"

    def is_within_bounds(self) -> bool:
        return (0 <= self.file < BOARD_DIMENSIONS[0]) and (
            0 <= self.rank < BOARD_DIMENSIONS[1]
        )

    def offset(self, df: int, dr: int) -> Square:
        return Square(self.file + df, self.rank + dr)

    def __str__(self) -> str:
        return self.to_algebraic()


def all_squares() -> list[Square]:
    return [
        Square(file, rank)
        for rank in range(BOARD_DIMENSIONS[1])
        for file in range(BOARD_DIMENSIONS[0])
    ]
