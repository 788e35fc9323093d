"""
Session Store

In-memory, per-session analysis state. Each session holds exactly one
Dataset and everything derived from it. Uploading replaces the session's
state wholesale; state is never mutated in place while readers hold it.
Nothing is written to disk.
"""

import logging
import threading
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Dict, List, Optional

from ..models import ChartSpec, Dataset, DatasetAnalysis
from .analysis import analyze_dataset

logger = logging.getLogger("csvinsights.session_store")


@dataclass(frozen=True)
class DatasetSession:
    """Immutable snapshot of one session's current dataset and analysis."""
    session_id: str
    analysis: DatasetAnalysis
    created_at: str
    updated_at: str


class SessionStore:
    """
    Thread-safe registry of dataset sessions.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._sessions: Dict[str, DatasetSession] = {}

    @staticmethod
    def new_session_id() -> str:
        return str(uuid.uuid4())

    def replace_dataset(self, session_id: Optional[str], dataset: Dataset) -> DatasetSession:
        """
        Analyze `dataset` and install it as the session's current state.

        Analysis runs before the lock is taken so readers keep seeing the
        previous snapshot until the new one is complete.
        """
        session_id = session_id or self.new_session_id()
        analysis = analyze_dataset(dataset)
        now = datetime.utcnow().isoformat()

        with self._lock:
            previous = self._sessions.get(session_id)
            session = DatasetSession(
                session_id=session_id,
                analysis=analysis,
                created_at=previous.created_at if previous else now,
                updated_at=now,
            )
            self._sessions[session_id] = session

        logger.info("Session %s: dataset replaced (%d rows, %d charts)",
                    session_id, analysis.row_count, len(analysis.chart_specs))
        return session

    def get(self, session_id: str) -> Optional[DatasetSession]:
        with self._lock:
            return self._sessions.get(session_id)

    def list_sessions(self) -> List[DatasetSession]:
        with self._lock:
            return list(self._sessions.values())

    def update_chart_specs(self, session_id: str, specs: List[ChartSpec]) -> Optional[DatasetSession]:
        """Swap in a new chart list, keeping the dataset and profiles."""
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            analysis = replace(session.analysis, chart_specs=list(specs))
            session = replace(session, analysis=analysis, updated_at=datetime.utcnow().isoformat())
            self._sessions[session_id] = session
            return session

    def reset(self, session_id: str) -> bool:
        with self._lock:
            if session_id not in self._sessions:
                return False
            del self._sessions[session_id]
        logger.info("Session %s: reset", session_id)
        return True

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()


session_store = SessionStore()
