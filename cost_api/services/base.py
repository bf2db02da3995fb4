"""
Collaborator interfaces used by the cost service.

The report cache and the cost service only depend on these abstract classes,
so they can run against the SQLAlchemy stores in production and against
in-memory stores in tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from cost_api.schemas.costs import Cost, CostCreate
from cost_api.schemas.reports import MonthlyReport


class RecordStore(ABC):
    """Persistence for expenditure records."""

    @abstractmethod
    async def find(self, owner_id: int, start: datetime, end: datetime) -> list[Cost]:
        """
        Return the owner's costs with ``start <= occurred_at < end``.

        Results are ordered by ``occurred_at`` ascending, then insertion order.

        Raises:
            StorageError: If the backing store cannot be read
        """

    @abstractmethod
    async def insert(self, record: CostCreate) -> Cost:
        """
        Persist a validated cost. ``record.occurred_at`` is always set.

        Raises:
            StorageError: If the write fails
        """

    @abstractmethod
    async def list_all(self) -> list[Cost]:
        """Return every stored cost in insertion order."""

    @abstractmethod
    async def list_for_owner(self, owner_id: int) -> list[Cost]:
        """Return the owner's costs in insertion order."""

    @abstractmethod
    async def total_for_owner(self, owner_id: int) -> float:
        """Return the sum of the owner's amounts, 0 when there are none."""


class ReportStore(ABC):
    """Persistence for materialized monthly reports."""

    @abstractmethod
    async def find_by_key(self, owner_id: int, year: int, month: int) -> MonthlyReport | None:
        """Return the stored report for the key, or None."""

    @abstractmethod
    async def insert_if_absent(self, report: MonthlyReport) -> MonthlyReport:
        """
        Store ``report`` unless one already exists for its key.

        Must be atomic: when two callers race on the same key exactly one
        report ends up stored and both receive that stored report.

        Returns:
            The report stored under the key after the call
        """


class UserDirectory(ABC):
    """Answers whether a user id is known to the users service."""

    @abstractmethod
    async def exists(self, owner_id: int) -> bool:
        """
        Raises:
            UpstreamUnavailable: If no well-formed answer could be obtained
        """
