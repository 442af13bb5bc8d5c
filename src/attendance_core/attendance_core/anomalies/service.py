from __future__ import annotations

import logging
import queue
import threading
from datetime import datetime
from typing import Any, Callable, Optional, Sequence

from ..common.datetime_utils import now_utc
from ..core.constants import ANOMALY_QUEUE_SIZE, ANOMALY_SESSION_SUMMARY_LIMIT
from ..core.enums import AnomalyType, DetectedAt
from ..core.exceptions import AnomalyValidationError
from .model import AnomalyLogEntry, SessionSummary, build_anomaly_entry
from .repository import AnomalyRepository

logger = logging.getLogger(__name__)

_STOP = object()


class AnomalyLogger:
    """Best-effort recorder of session anomalies.

    Callers hand an anomaly over and return immediately. In background mode
    entries go through a bounded queue drained by a single writer thread;
    otherwise they are written inline. Either way validation and storage
    failures are logged and never reach the caller.
    """

    def __init__(
        self,
        repository: AnomalyRepository,
        *,
        background: bool = True,
        max_queue: int = ANOMALY_QUEUE_SIZE,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._repo = repository
        self._clock = clock
        self._queue: Optional[queue.Queue] = None
        self._worker: Optional[threading.Thread] = None
        if background:
            self._queue = queue.Queue(maxsize=max_queue)
            self._worker = threading.Thread(target=self._drain, name="anomaly-log-writer", daemon=True)
            self._worker.start()

    def log_stale_open_session(
        self,
        *,
        user_id: int,
        session_date: str,
        check_in_at: datetime,
        detected_at: DetectedAt,
    ) -> None:
        self.record(
            AnomalyType.STALE_OPEN_SESSION,
            user_id,
            {"sessionDate": session_date, "checkInAt": check_in_at, "detectedAt": detected_at},
        )

    def log_multiple_active_sessions(
        self,
        *,
        user_id: int,
        sessions: Sequence[SessionSummary],
        session_count: Optional[int] = None,
    ) -> None:
        summaries = list(sessions)[:ANOMALY_SESSION_SUMMARY_LIMIT]
        self.record(
            AnomalyType.MULTIPLE_ACTIVE_SESSIONS,
            user_id,
            {
                "sessionCount": len(sessions) if session_count is None else session_count,
                "sessions": [s.to_dict() for s in summaries],
            },
        )

    def record(self, anomaly_type: Any, user_id: int, details: Any) -> None:
        try:
            entry = build_anomaly_entry(anomaly_type, user_id, details, created_at=self._clock())
        except AnomalyValidationError as e:
            logger.error("Dropping invalid %s anomaly for user %s: %s", anomaly_type, user_id, e)
            return

        logger.warning("Attendance anomaly %s for user %s: %s", entry.anomaly_type.value, user_id, entry.details)

        if self._queue is None or not self._worker_alive():
            self._write(entry)
            return

        try:
            self._queue.put_nowait(entry)
        except queue.Full:
            logger.error("Anomaly queue full, dropping %s for user %s", entry.anomaly_type.value, user_id)

    def flush(self) -> None:
        """Block until every queued entry has been handed to the repository."""

        if self._queue is not None and self._worker_alive():
            self._queue.join()

    def close(self, timeout: float = 5.0) -> None:
        if self._queue is None or not self._worker_alive():
            return
        self._queue.put(_STOP)
        self._worker.join(timeout)

    def _worker_alive(self) -> bool:
        return self._worker is not None and self._worker.is_alive()

    def _write(self, entry: AnomalyLogEntry) -> None:
        try:
            self._repo.create(entry)
        except Exception:
            logger.exception("Failed to write %s anomaly for user %s", entry.anomaly_type.value, entry.user_id)

    def _drain(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                self._write(item)
            finally:
                self._queue.task_done()
