from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, tzinfo

from loguru import logger

from cost_api.schemas.costs import Cost
from cost_api.schemas.reports import CategoryEntry
from cost_api.services.base import RecordStore
from cost_api.services.periods import localize

CategoryMap = dict[str, list[CategoryEntry]]


def group_by_category(records: Iterable[Cost], tz: tzinfo) -> CategoryMap:
    """
    Group costs by category name.

    Entries keep ``occurred_at`` order with the record id breaking ties, and
    carry the day of month as seen in ``tz``. Categories without costs are
    absent from the result.
    """
    ordered = sorted(records, key=lambda r: (localize(r.occurred_at, tz), r.id))
    grouped: CategoryMap = {}
    for record in ordered:
        grouped.setdefault(record.category, []).append(
            CategoryEntry(
                amount=record.amount,
                description=record.description,
                day=localize(record.occurred_at, tz).day,
            )
        )
    return grouped


class CategoryAggregator:
    def __init__(self, records: RecordStore, tz: tzinfo):
        self.records = records
        self.tz = tz

    async def aggregate(
        self,
        owner_id: int,
        year: int,
        month: int,
        start: datetime,
        end: datetime,
    ) -> CategoryMap:
        costs = await self.records.find(owner_id, start, end)
        grouped = group_by_category(costs, self.tz)
        logger.debug(
            "Aggregated costs",
            owner_id=owner_id,
            year=year,
            month=month,
            records=len(costs),
            categories=len(grouped),
        )
        return grouped
