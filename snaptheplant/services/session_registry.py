"""
Registry of live identification sessions.

Sessions are in-process state keyed by session id and owned by one user.
The oldest sessions are evicted once the registry is full.
"""

import logging
from collections import OrderedDict
from typing import Optional

from snaptheplant.core.errors import NotFoundError
from snaptheplant.models.identity import UserIdentity
from snaptheplant.services.identification_session import IdentificationSession, SessionContext

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Creates, finds and discards sessions for a shared SessionContext."""

    def __init__(self, context: SessionContext, max_sessions: int = 1000):
        self.context = context
        self.max_sessions = max_sessions
        self._sessions: "OrderedDict[str, IdentificationSession]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, user: Optional[UserIdentity] = None) -> IdentificationSession:
        session = IdentificationSession(context=self.context, user=user or UserIdentity())
        self._sessions[session.session_id] = session

        while len(self._sessions) > self.max_sessions:
            evicted_id, _ = self._sessions.popitem(last=False)
            logger.debug(f"Evicted session {evicted_id}")

        return session

    def get(self, session_id: str, user: Optional[UserIdentity] = None) -> IdentificationSession:
        """
        Look up a session.

        Raises:
            NotFoundError: If the session does not exist or belongs to another user
        """
        session = self._sessions.get(session_id)
        if session is None or (user is not None and session.user.user_id != user.user_id):
            raise NotFoundError(f"Session {session_id} not found")
        self._sessions.move_to_end(session_id)
        return session

    def discard(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None
