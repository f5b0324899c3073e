"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from typing import Optional

# Type aliases to make MatchModel easier to read
PlayerName = str
Coordinate = tuple[int, int]


@dataclass
class MoveModel:
    """Transport-safe move: plain (x, y) tuples and an optional promotion name."""

    original: Coordinate
    new: Coordinate
    promotion: Optional[str] = None


@dataclass
class MatchModel:
    """Transport-safe representation of a match used between API, Service, DB, and Match layers."""

    host: PlayerName
    opponent: PlayerName
    board_fen: str
    side_to_move: str
    status: str
    winner: Optional[PlayerName] = None
    moves: list[MoveModel] = field(default_factory=list)
