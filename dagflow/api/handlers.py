"""Session state for the API: latest graph per session, last request wins."""

import asyncio
from datetime import datetime
from typing import Optional
from uuid import uuid4

from dagflow.models import PipelineResult
from dagflow.utils.logger import get_logger

logger = get_logger()


class Session:
    """Generations and the latest accepted result of one client session."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        self.created_at = datetime.now()
        self.updated_at = datetime.now()
        self.generation = 0
        self.completed_generation = 0
        self.result: Optional[PipelineResult] = None

    def update_result(self, generation: int, result: PipelineResult) -> None:
        """Store a result and the generation it belongs to."""
        self.result = result
        self.completed_generation = generation
        self.updated_at = datetime.now()


class SessionManager:
    """Tracks sessions so that a newer request supersedes an older one.

    Each request takes a generation number from :meth:`begin`. When the
    request completes, :meth:`complete` keeps its result only if no newer
    request for the same session has started meanwhile; stale results are
    discarded, never merged.
    """

    def __init__(self):
        self._sessions: dict[str, Session] = {}
        self._lock = asyncio.Lock()

    async def begin(self, session_id: Optional[str] = None) -> tuple[str, int]:
        """Start a request for a session.

        Args:
            session_id: Session to use; a new one is created when omitted.

        Returns:
            Tuple of (session_id, generation).
        """
        session_id = session_id or str(uuid4())[:8]
        async with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                session = Session(session_id)
                self._sessions[session_id] = session
                logger.info(f"Created session {session_id}")
            session.generation += 1
            return session_id, session.generation

    async def complete(self, session_id: str, generation: int, result: PipelineResult) -> bool:
        """Record a finished request.

        Returns:
            True if the result was kept, False if a newer request superseded it.
        """
        async with self._lock:
            session = self._sessions.get(session_id)
            if session is None or generation != session.generation:
                logger.info(
                    f"[{session_id}] Discarding result of generation {generation} "
                    f"(superseded)"
                )
                return False
            session.update_result(generation, result)
            return True

    def latest(self, session_id: str) -> Optional[PipelineResult]:
        """Most recent kept result of a session."""
        session = self._sessions.get(session_id)
        return session.result if session else None

    async def delete_session(self, session_id: str) -> bool:
        """Forget a session.

        Returns:
            True if deleted, False if not found.
        """
        async with self._lock:
            if session_id in self._sessions:
                del self._sessions[session_id]
                logger.info(f"Deleted session {session_id}")
                return True
        return False


# Global session manager instance
session_manager = SessionManager()
