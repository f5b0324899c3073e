"""
Administrative identity.

Kept apart from the chess logic: the admin does not take part in matches, the record only guards its own updates.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from src.core.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)


@dataclass
class AdminConfig:
    admin: Optional[str] = None

    def is_admin(self, identity: str) -> bool:
        return self.admin is not None and self.admin == identity

    def assert_admin(self, identity: str) -> None:
        if not self.is_admin(identity):
            raise UnauthorizedError(f"{identity!r} is not the admin.")

    def update(self, requester: str, new_admin: Optional[str]) -> None:
        """Only the current admin can hand over (or give up) the role. Without an admin, nobody can."""
        self.assert_admin(requester)
        logger.info("Admin changed from %r to %r", self.admin, new_admin)
        self.admin = new_admin
