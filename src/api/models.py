"""Requests and Response models"""

from typing import Optional, Self

from pydantic import BaseModel, field_validator

from src.chess.square import BOARD_DIMENSIONS
from src.core.exceptions import IllegalMoveError, OutOfRangeError
from src.core.models import MoveModel
from src.core.shared_types import Color, PieceType, Status

PlayerName = str
Coordinate = tuple[int, int]


class MoveData(BaseModel):
    """A move as it travels over the wire: {"original": [x, y], "new": [x, y], "promotion": "queen"}"""

    original: Coordinate
    new: Coordinate
    promotion: Optional[PieceType] = None

    @field_validator(*["original", "new"])
    @classmethod
    def validate_coordinate(cls, value: Coordinate) -> Coordinate:
        x, y = value
        if not (0 <= x < BOARD_DIMENSIONS[0] and 0 <= y < BOARD_DIMENSIONS[1]):
            raise OutOfRangeError(
                f"Coordinate {list(value)} is not on the board. Both values must lie in 0..{BOARD_DIMENSIONS[0] - 1}."
            )
        return value

    @field_validator("promotion", mode="before")
    @classmethod
    def validate_promotion(cls, value: object) -> object:
        if value is None or isinstance(value, PieceType):
            return value
        try:
            return PieceType(value)
        except ValueError as e:
            raise IllegalMoveError(f"Cannot promote into {value!r}.") from e

    @classmethod
    def from_model(cls, model: MoveModel) -> Self:
        return cls(
            original=model.original,
            new=model.new,
            promotion=PieceType(model.promotion) if model.promotion else None,
        )

    def to_model(self) -> MoveModel:
        return MoveModel(
            original=self.original,
            new=self.new,
            promotion=str(self.promotion) if self.promotion else None,
        )


# --- REQUEST MODELS ---
class StartMatchRequest(BaseModel):
    opponent: PlayerName
    first_move: MoveData


class PlayMoveRequest(BaseModel):
    host: PlayerName
    opponent: PlayerName
    move: MoveData


class CheckMatchRequest(BaseModel):
    host: PlayerName
    opponent: PlayerName


class LegalMovesRequest(BaseModel):
    host: PlayerName
    opponent: PlayerName


class UpdateAdminRequest(BaseModel):
    # None removes the admin altogether
    admin: Optional[PlayerName] = None


# --- RESPONSE MODELS ---
class MatchResponse(BaseModel):
    host: PlayerName
    opponent: PlayerName
    board: str
    side_to_move: Color
    status: Status
    winner: Optional[PlayerName]
    moves: list[MoveData]
    move_history: list[str]


class LegalMovesResponse(BaseModel):
    host: PlayerName
    opponent: PlayerName
    player: PlayerName
    color: Color
    legal_moves: list[MoveData]


class AdminResponse(BaseModel):
    admin: Optional[PlayerName]
