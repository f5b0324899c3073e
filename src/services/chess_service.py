"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
from threading import Lock
from typing import Optional

from src.api.models import (
    AdminResponse,
    CheckMatchRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MatchResponse,
    MoveData,
    PlayMoveRequest,
    StartMatchRequest,
    UpdateAdminRequest,
)
from src.chess.match import Match
from src.chess.moves import Move
from src.core.exceptions import GameError, MatchAlreadyExistsError, NoMatchError
from src.core.models import MatchModel
from src.db.repository import MatchRepository
from src.services.admin import AdminConfig

logger = logging.getLogger(__name__)


class ChessService:
    """
    Orchestration of layers for chess matches.

    Requests are processed one at a time: load, validate, mutate, persist/delete all happen while holding
    a single lock, so one request fully settles before the next one is looked at.
    """

    def __init__(
        self, repository: MatchRepository, admin: Optional[AdminConfig] = None
    ) -> None:
        self.repo = repository
        self.admin = admin if admin is not None else AdminConfig()
        self._lock = Lock()

    # -- API routes logic ---
    def start_match(self, requester: str, request: StartMatchRequest) -> MatchResponse:
        """Requester challenges the opponent and plays the first (white) move."""
        with self._lock:
            host, opponent = requester, request.opponent
            first_move = Move.from_model(request.first_move.to_model())

            if self.repo.get_match(host, opponent) is not None:
                raise MatchAlreadyExistsError(
                    f"{host!r} already has an active match against {opponent!r}."
                )

            try:
                match = Match.start(host, opponent, first_move)
            except GameError as e:
                logger.info("Rejected start of %r vs %r: %s", host, opponent, e)
                raise

            logger.info("Match %r vs %r started with %s", host, opponent, first_move.to_uci())
            return self._persist(match)

    def play_move(self, requester: str, request: PlayMoveRequest) -> MatchResponse:
        """Make a move attempt."""
        with self._lock:
            # Off-board coordinates already failed while building the request. This covers direct callers.
            move = Move.from_model(request.move.to_model())

            # Retrieve persisted MatchModel from repository and rebuild the Match
            match = Match.from_model(self._fetch_match(request.host, request.opponent))

            try:
                match.apply(requester, move)
            except GameError as e:
                logger.info(
                    "Rejected move %s by %r in %r vs %r: %s",
                    move.to_uci(),
                    requester,
                    request.host,
                    request.opponent,
                    e,
                )
                raise

            return self._persist(match)

    def check_match(self, request: CheckMatchRequest) -> MatchResponse:
        """Retrieve current match state without changing anything."""
        with self._lock:
            model = self._fetch_match(request.host, request.opponent)
            return self._create_match_response(Match.from_model(model))

    def legal_moves(
        self, requester: str, request: LegalMovesRequest
    ) -> LegalMovesResponse:
        """retrieve set of legal moves for the player on turn."""
        with self._lock:
            match = Match.from_model(self._fetch_match(request.host, request.opponent))
            legal_moves = match.legal_moves(requester)
            return LegalMovesResponse(
                host=match.host,
                opponent=match.opponent,
                player=requester,
                color=match.color_of(requester),
                legal_moves=[MoveData.from_model(move.to_model()) for move in legal_moves],
            )

    def get_admin(self) -> AdminResponse:
        with self._lock:
            return AdminResponse(admin=self.admin.admin)

    def update_admin(self, requester: str, request: UpdateAdminRequest) -> AdminResponse:
        """Delegated entirely to the admin record; no match is touched."""
        with self._lock:
            self.admin.update(requester, request.admin)
            return AdminResponse(admin=self.admin.admin)

    # -- Internal helpers --
    def _persist(self, match: Match) -> MatchResponse:
        """Store the match while it is going. A finished match is removed from the registry."""
        if match.is_finished:
            self.repo.delete_match(match.host, match.opponent)
            logger.info("Match %r vs %r removed from registry", match.host, match.opponent)
        else:
            self.repo.put_match(match.host, match.opponent, match.to_model())
        return self._create_match_response(match)

    def _create_match_response(self, match: Match) -> MatchResponse:
        """Convert a Match to a MatchResponse."""
        return MatchResponse(
            host=match.host,
            opponent=match.opponent,
            board=match.board.to_fen(),
            side_to_move=match.side_to_move,
            status=match.status,
            winner=match.winner,
            moves=[MoveData.from_model(move.to_model()) for move in match.moves],
            move_history=match.describe_moves(),
        )

    def _fetch_match(self, host: str, opponent: str) -> MatchModel:
        """Attempt to find the match in the repository and raise error if it fails."""
        match_model = self.repo.get_match(host, opponent)
        if match_model is None:
            raise NoMatchError(f"No active match with {host=} and {opponent=}.")
        return match_model
