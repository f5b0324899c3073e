"""Protocol repository (the Match Registry). Implemented with SQLAlchemy and with a plain dictionary."""

from typing import Protocol

from src.core.models import MatchModel


class MatchRepository(Protocol):
    """Persistence layer orchestration. Records are keyed by the ordered (host, opponent) pair."""

    def get_match(self, host: str, opponent: str) -> MatchModel | None:
        """Get the match between host and opponent, if record exists."""
        ...

    def put_match(self, host: str, opponent: str, match: MatchModel) -> MatchModel:
        """Store the match, overwriting an existing record for the same pair."""
        ...

    def delete_match(self, host: str, opponent: str) -> MatchModel | None:
        """Remove a match's record."""
        ...
