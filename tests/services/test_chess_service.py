"""Unit tests for src/services/chess_service.py"""

import threading
import time

import pytest

from src.api.models import MatchResponse, MoveData
from src.chess.moves import Move
from src.core.exceptions import (
    GameError,
    IllegalMoveError,
    MatchAlreadyExistsError,
    NoMatchError,
    NotYourTurnError,
    OutOfRangeError,
    UnauthorizedError,
)
from src.core.models import MatchModel
from src.core.shared_types import Color, PieceType, Status
from src.db.memory_repository import InMemoryMatchRepository
from src.services.admin import AdminConfig
from src.services.chess_service import (
    ChessService,
    CheckMatchRequest,
    LegalMovesRequest,
    PlayMoveRequest,
    StartMatchRequest,
    UpdateAdminRequest,
)

HOST = "mario"
OPPONENT = "bowser"


def move_data(original: list[int], new: list[int], promotion: str | None = None) -> MoveData:
    return MoveData(original=original, new=new, promotion=promotion)


def uci_data(uci: str) -> MoveData:
    return MoveData.from_model(Move.from_uci(uci).to_model())


@pytest.fixture
def service(memory_repository: InMemoryMatchRepository) -> ChessService:
    return ChessService(memory_repository, AdminConfig(admin="peach"))


@pytest.fixture
def started(service: ChessService) -> MatchResponse:
    """Host opened with e2-e4"""
    request = StartMatchRequest(opponent=OPPONENT, first_move=move_data([4, 1], [4, 3]))
    return service.start_match(HOST, request)


def play(service: ChessService, player: str, move: MoveData) -> MatchResponse:
    return service.play_move(
        player, PlayMoveRequest(host=HOST, opponent=OPPONENT, move=move)
    )


def check(service: ChessService) -> MatchResponse:
    return service.check_match(CheckMatchRequest(host=HOST, opponent=OPPONENT))


# --- SERVICE - START MATCH ----
def test_start_match(
    service: ChessService,
    memory_repository: InMemoryMatchRepository,
    started: MatchResponse,
) -> None:
    """Check that new match is created, persisted in repo, and the response has the appropriate information."""
    assert started.host == HOST
    assert started.opponent == OPPONENT
    assert started.board == "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR"
    assert started.side_to_move == Color.BLACK
    assert started.status == Status.IN_PROGRESS
    assert started.winner is None
    assert started.move_history == ["Move made from (4,1) to (4,3)"]

    stored = memory_repository.get_match(HOST, OPPONENT)
    assert isinstance(stored, MatchModel)
    assert stored.board_fen == started.board
    assert stored.side_to_move == "black"


def test_start_match_with_illegal_move(
    service: ChessService, memory_repository: InMemoryMatchRepository
) -> None:
    request = StartMatchRequest(opponent=OPPONENT, first_move=move_data([4, 1], [4, 4]))
    with pytest.raises(IllegalMoveError):
        service.start_match(HOST, request)
    assert memory_repository.get_match(HOST, OPPONENT) is None


def test_start_match_twice(service: ChessService, started: MatchResponse) -> None:
    request = StartMatchRequest(opponent=OPPONENT, first_move=move_data([3, 1], [3, 3]))
    with pytest.raises(MatchAlreadyExistsError):
        service.start_match(HOST, request)
    assert check(service) == started


def test_reverse_pair_is_a_separate_match(service: ChessService, started: MatchResponse) -> None:
    """The opponent can host their own match against the same player"""
    request = StartMatchRequest(opponent=HOST, first_move=move_data([3, 1], [3, 3]))
    response = service.start_match(OPPONENT, request)
    assert response.host == OPPONENT
    assert check(service) == started


# --- SERVICE - PLAY MOVE ----
def test_play_move(service: ChessService, started: MatchResponse) -> None:
    response = play(service, OPPONENT, move_data([4, 6], [4, 4]))
    assert response.side_to_move == Color.WHITE
    assert response.board == "rnbqkbnr/pppp1ppp/8/4p3/4P3/8/PPPP1PPP/RNBQKBNR"
    assert len(response.moves) == 2
    assert check(service) == response


def test_play_move_unknown_match(service: ChessService) -> None:
    with pytest.raises(NoMatchError):
        play(service, OPPONENT, move_data([4, 6], [4, 4]))


def test_service_propagates_game_errors(service: ChessService, started: MatchResponse) -> None:
    """Any top-level custom exception is raised (specific exception types are tested in the Match tests)"""
    with pytest.raises(GameError):
        play(service, HOST, move_data([3, 1], [3, 3]))


def test_scholars_mate_deletes_match(service: ChessService) -> None:
    """
    e4 e5, Qh5 Nf6, Bc4 Nc6, Qxf7#
    The last move ends the game, reports the host as winner and removes the record.
    """
    service.start_match(
        HOST, StartMatchRequest(opponent=OPPONENT, first_move=move_data([4, 1], [4, 3]))
    )
    play(service, OPPONENT, move_data([4, 6], [4, 4]))
    play(service, HOST, move_data([3, 0], [7, 4]))
    play(service, OPPONENT, move_data([6, 7], [5, 5]))
    play(service, HOST, move_data([5, 0], [2, 3]))
    play(service, OPPONENT, move_data([1, 7], [2, 5]))
    final = play(service, HOST, move_data([7, 4], [5, 6]))

    assert final.status == Status.CHECKMATE
    assert final.winner == HOST
    assert len(final.move_history) == 7
    with pytest.raises(NoMatchError):
        check(service)
    with pytest.raises(NoMatchError):
        play(service, OPPONENT, move_data([4, 7], [4, 6]))


def test_stranger_cannot_play(service: ChessService, started: MatchResponse) -> None:
    with pytest.raises(UnauthorizedError):
        play(service, "luigi", move_data([4, 6], [4, 4]))
    assert check(service) == started


def test_not_your_turn(service: ChessService, started: MatchResponse) -> None:
    with pytest.raises(NotYourTurnError):
        play(service, HOST, move_data([3, 1], [3, 3]))
    assert check(service) == started


def test_illegal_move_leaves_state_untouched(service: ChessService, started: MatchResponse) -> None:
    with pytest.raises(IllegalMoveError):
        play(service, OPPONENT, move_data([3, 7], [3, 3]))
    assert check(service) == started


def test_promotion_required(
    service: ChessService, memory_repository: InMemoryMatchRepository
) -> None:
    """A pawn reaching the last rank without a promotion field is an illegal move"""
    memory_repository.put_match(
        HOST,
        OPPONENT,
        MatchModel(
            host=HOST,
            opponent=OPPONENT,
            board_fen="4k3/P7/8/8/8/8/8/4K3",
            side_to_move="white",
            status="in progress",
        ),
    )
    with pytest.raises(IllegalMoveError):
        play(service, HOST, move_data([0, 6], [0, 7]))

    response = play(service, HOST, move_data([0, 6], [0, 7], promotion="queen"))
    assert response.board == "Q3k3/8/8/8/8/8/8/4K3"
    assert response.moves[-1].promotion == PieceType.QUEEN


def test_off_board_coordinate_fails_before_lookup(service: ChessService) -> None:
    """[8, 0] is rejected as OutOfRange, even before finding out there is no such match"""
    with pytest.raises(OutOfRangeError):
        move_data([8, 0], [4, 3])

    unchecked = MoveData.model_construct(original=(8, 0), new=(4, 3), promotion=None)
    with pytest.raises(OutOfRangeError):
        play(service, HOST, unchecked)


def test_stalemate_deletes_match(
    service: ChessService, memory_repository: InMemoryMatchRepository
) -> None:
    memory_repository.put_match(
        HOST,
        OPPONENT,
        MatchModel(
            host=HOST,
            opponent=OPPONENT,
            board_fen="k7/8/8/1Q6/8/8/8/4K3",
            side_to_move="white",
            status="in progress",
        ),
    )
    response = play(service, HOST, uci_data("b5b6"))
    assert response.status == Status.STALEMATE
    assert response.winner is None
    assert memory_repository.get_match(HOST, OPPONENT) is None


# --- SERVICE - LEGAL MOVES ----
def test_legal_moves(service: ChessService, started: MatchResponse) -> None:
    response = service.legal_moves(
        OPPONENT, LegalMovesRequest(host=HOST, opponent=OPPONENT)
    )
    assert response.player == OPPONENT
    assert response.color == Color.BLACK
    assert len(response.legal_moves) == 20
    assert uci_data("e7e5") in response.legal_moves


def test_legal_moves_before_your_turn(service: ChessService, started: MatchResponse) -> None:
    with pytest.raises(NotYourTurnError):
        service.legal_moves(HOST, LegalMovesRequest(host=HOST, opponent=OPPONENT))


# --- SERVICE - ADMIN ----
def test_admin_update(service: ChessService) -> None:
    assert service.get_admin().admin == "peach"
    response = service.update_admin("peach", UpdateAdminRequest(admin="toad"))
    assert response.admin == "toad"
    assert service.get_admin().admin == "toad"


def test_admin_update_by_non_admin(service: ChessService) -> None:
    with pytest.raises(UnauthorizedError):
        service.update_admin(HOST, UpdateAdminRequest(admin=HOST))
    assert service.get_admin().admin == "peach"


# --- SERVICE - CONCURRENCY ----
class SlowRepository(InMemoryMatchRepository):
    """Widens the gap between loading and storing a match"""

    def get_match(self, host: str, opponent: str) -> MatchModel | None:
        model = super().get_match(host, opponent)
        time.sleep(0.05)
        return model


def test_concurrent_moves_are_processed_one_at_a_time() -> None:
    """Two identical moves arrive at the same time: only the first one can be on turn"""
    repository = SlowRepository()
    service = ChessService(repository)
    service.start_match(
        HOST, StartMatchRequest(opponent=OPPONENT, first_move=move_data([4, 1], [4, 3]))
    )

    barrier = threading.Barrier(2)
    results: list[MatchResponse] = []
    errors: list[Exception] = []

    def attempt() -> None:
        barrier.wait()
        try:
            results.append(play(service, OPPONENT, move_data([4, 6], [4, 4])))
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=attempt) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(results) == 1
    assert len(errors) == 1
    assert isinstance(errors[0], NotYourTurnError)

    stored = repository.get_match(HOST, OPPONENT)
    assert stored is not None
    assert len(stored.moves) == 2
    assert stored.side_to_move == "white"
