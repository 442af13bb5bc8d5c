from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .model import AnomalyLogEntry


class AnomalyRepository(Protocol):
    def create(self, entry: AnomalyLogEntry) -> int:
        """Append one entry; entries are never updated."""

        raise NotImplementedError

    def purge_expired(self, *, now: datetime) -> int:
        raise NotImplementedError
