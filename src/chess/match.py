"""
The Match class is the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating all the business logic required to play a turn -->
passes this information to the service layer, which can then persist it (or delete it once the game is over).
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Self

from src.chess import rules
from src.chess.board import Board
from src.chess.moves import Move
from src.core.exceptions import (
    GameError,
    IllegalMoveError,
    InvalidRequestError,
    MatchAlreadyFinishedError,
    NotYourTurnError,
    RepositoryError,
    UnauthorizedError,
)
from src.core.models import MatchModel
from src.core.shared_types import Color, Status

logger = logging.getLogger(__name__)


@dataclass
class Match:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    host: str
    opponent: str
    board: Board
    side_to_move: Color = Color.WHITE
    status: Status = Status.IN_PROGRESS
    winner: Optional[str] = None
    moves: list[Move] = field(default_factory=list)

    @classmethod
    def start(cls, host: str, opponent: str, first_move: Move) -> Self:
        """
        The host challenges the opponent AND plays the opening move in one go.
        Host always gets the white pieces, so a match is never seen before its first move was made.
        """
        if host == opponent:
            raise InvalidRequestError(f"{host!r} cannot start a match against themselves.")

        match = cls(host=host, opponent=opponent, board=Board.starting_position())
        match.apply(host, first_move)
        return match

    @classmethod
    def from_model(cls, model: MatchModel) -> Self:
        """Define how to construct a Match from the information the Service layer actually has"""
        try:
            board = Board.from_fen(model.board_fen)
            side_to_move = Color(model.side_to_move)
            status = Status(model.status)
            moves = [Move.from_model(move) for move in model.moves]
        except (ValueError, GameError) as e:
            raise RepositoryError(
                f"Stored match {model.host!r} vs {model.opponent!r} is corrupt: {e}"
            ) from e

        return cls(
            host=model.host,
            opponent=model.opponent,
            board=board,
            side_to_move=side_to_move,
            status=status,
            winner=model.winner,
            moves=moves,
        )

    def to_model(self) -> MatchModel:
        """Encode back into a format the Service layer uses"""
        return MatchModel(
            host=self.host,
            opponent=self.opponent,
            board_fen=self.board.to_fen(),
            side_to_move=str(self.side_to_move),
            status=str(self.status),
            winner=self.winner,
            moves=[move.to_model() for move in self.moves],
        )

    @property
    def players(self) -> dict[Color, str]:
        return {Color.WHITE: self.host, Color.BLACK: self.opponent}

    @property
    def player_to_move(self) -> str:
        return self.players[self.side_to_move]

    @property
    def is_finished(self) -> bool:
        return self.status != Status.IN_PROGRESS

    def color_of(self, player: str) -> Color:
        """Which pieces `player` plays with. Anyone else has no business in this match."""
        for color, name in self.players.items():
            if name == player:
                return color
        raise UnauthorizedError(
            f"{player!r} does not play in the match {self.host!r} vs {self.opponent!r}."
        )

    def legal_moves(self, player: str) -> list[Move]:
        """
        Moves the player could make right now.
        ----

        1. Check the match is still going and it is your turn
        2. Yes? Generate legal moves.
        """
        self._assert_in_progress()
        self._assert_your_turn(player)
        return rules.legal_moves(self.board, self.side_to_move)

    def apply(self, player: str, move: Move) -> None:
        """
        Attempt to make a move
        -----

        Everything gets checked before anything changes, so a rejected move leaves the match untouched.

        1. the match must still be in progress
        2. the player must take part and it must be their turn
        3. the move must be legal
        4. update the board, the moves made and the side to move
        5. update game status (if needed)
        """
        self._assert_in_progress()
        self._assert_your_turn(player)

        if not rules.is_legal(self.board, self.side_to_move, move):
            raise IllegalMoveError(f"Move not allowed: {move.to_uci()}")

        self.board.move_piece(move)
        self.moves.append(move)
        mover = self.side_to_move
        self.side_to_move = mover.opponent
        logger.debug("%s (%s) played %s", player, mover, move.to_uci())

        self._update_status(mover)

    def describe_moves(self) -> list[str]:
        return [move.describe() for move in self.moves]

    # -- PRIVATE HELPERS ---
    def _assert_in_progress(self) -> None:
        if self.is_finished:
            raise MatchAlreadyFinishedError(
                f"Match {self.host!r} vs {self.opponent!r} is over. status: {self.status}"
            )

    def _assert_your_turn(self, player: str) -> None:
        """You must wait for your turn before calculating legal moves / making a move."""
        if self.color_of(player) != self.side_to_move:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for player {self.player_to_move} to make a move first."
            )

    def _update_status(self, mover: Color) -> None:
        """Checks if the side that is now to move is mated or stalemated.

        NOTE the side to move has already been flipped. The winner of a checkmate is the player that just moved.
        """
        self.status = rules.classify(self.board, self.side_to_move)
        if self.status == Status.CHECKMATE:
            self.winner = self.players[mover]
        if self.is_finished:
            logger.info(
                "Match %r vs %r ended: %s (winner: %s)",
                self.host,
                self.opponent,
                self.status,
                self.winner,
            )
