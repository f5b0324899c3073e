"""Implementation of (Match)Repository using SQLAlchemy"""

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.models import MatchModel, MoveModel
from src.db.schema import DBMatch


class SQLMatchRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_match(self, host: str, opponent: str) -> MatchModel | None:
        """Get the match between host and opponent, if record exists."""
        match_db = self._fetch_match(host, opponent)
        if match_db:
            return self._to_model(match_db)
        return None

    def put_match(self, host: str, opponent: str, match: MatchModel) -> MatchModel:
        """Insert a new record, or overwrite the existing one for this pair."""
        match_db = self._fetch_match(host, opponent)
        if match_db is None:
            match_db = DBMatch(host=host, opponent=opponent)
            self.db.add(match_db)
        match_db.board_fen = match.board_fen
        match_db.side_to_move = match.side_to_move
        match_db.status = match.status
        match_db.winner = match.winner
        match_db.moves = [self._move_to_json(move) for move in match.moves]
        self.db.commit()
        self.db.refresh(match_db)
        return self._to_model(match_db)

    def delete_match(self, host: str, opponent: str) -> MatchModel | None:
        """Remove a match's record."""
        match_db = self._fetch_match(host, opponent)
        if not match_db:
            return None
        match_model = self._to_model(match_db)
        self.db.delete(match_db)
        self.db.commit()
        return match_model

    def _fetch_match(self, host: str, opponent: str) -> DBMatch | None:
        query = select(DBMatch).where(
            DBMatch.host == host, DBMatch.opponent == opponent
        )
        return self.db.scalar(query)

    def _to_model(self, match_db: DBMatch) -> MatchModel:
        """Convert SQLAlchemy model to data transfer model."""
        return MatchModel(
            host=match_db.host,
            opponent=match_db.opponent,
            board_fen=match_db.board_fen,
            side_to_move=match_db.side_to_move,
            status=match_db.status,
            winner=match_db.winner,
            moves=[self._move_from_json(move) for move in match_db.moves],
        )

    @staticmethod
    def _move_to_json(move: MoveModel) -> dict[str, Any]:
        return {
            "original": list(move.original),
            "new": list(move.new),
            "promotion": move.promotion,
        }

    @staticmethod
    def _move_from_json(data: dict[str, Any]) -> MoveModel:
        return MoveModel(
            original=tuple(data["original"]),
            new=tuple(data["new"]),
            promotion=data.get("promotion"),
        )
