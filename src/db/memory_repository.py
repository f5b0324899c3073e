"""Implementation of (Match)Repository that keeps everything in a dictionary. Used for tests and when no database is configured."""

from copy import deepcopy

from src.core.models import MatchModel


class InMemoryMatchRepository:
    """Records live as long as the process. Copies go in and out, so callers never share state with the store."""

    def __init__(self) -> None:
        self._matches: dict[tuple[str, str], MatchModel] = {}

    def get_match(self, host: str, opponent: str) -> MatchModel | None:
        match = self._matches.get((host, opponent))
        return deepcopy(match) if match is not None else None

    def put_match(self, host: str, opponent: str, match: MatchModel) -> MatchModel:
        self._matches[(host, opponent)] = deepcopy(match)
        return match

    def delete_match(self, host: str, opponent: str) -> MatchModel | None:
        return self._matches.pop((host, opponent), None)

    def clear(self) -> None:
        """Clear the repository (useful in between tests)"""
        self._matches.clear()
