from __future__ import annotations

from abc import ABC, abstractmethod

from career_spark.models import JobRecord


class JobSource(ABC):
    """A job provider. Implementations degrade instead of raising."""

    @abstractmethod
    def search(
        self, query: str, location: str | None = None, max_results: int = 10
    ) -> list[JobRecord]:
        pass
