"""
Monthly report building and caching.

Reports for months that are still open (the current month or a future one)
are always built from the live cost records, because more costs may still
arrive. Once a month has fully elapsed its report is built once, stored, and
served from the report store afterwards. Stored reports are never
invalidated: a later change to the underlying costs is not reflected.
"""

from __future__ import annotations

from datetime import datetime, tzinfo

from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from cost_api.core.errors import UserNotFound, ValidationError
from cost_api.schemas.reports import MonthlyReport, ReportQuery
from cost_api.services.aggregator import CategoryAggregator
from cost_api.services.base import RecordStore, ReportStore, UserDirectory
from cost_api.services.merger import MANDATORY_CATEGORIES, merge_categories
from cost_api.services.periods import MonthPeriod, has_month_elapsed, month_period


def validate_report_query(owner_id, year, month) -> ReportQuery:
    try:
        return ReportQuery(owner_id=owner_id, year=year, month=month)
    except PydanticValidationError as exc:
        raise ValidationError.from_pydantic(exc) from exc


class ReportCache:
    def __init__(
        self,
        records: RecordStore,
        reports: ReportStore,
        users: UserDirectory,
        tz: tzinfo,
    ):
        self.records = records
        self.reports = reports
        self.users = users
        self.tz = tz
        self.aggregator = CategoryAggregator(records, tz)

    async def get_report(self, owner_id, year, month, now: datetime) -> MonthlyReport:
        """
        Return the category report for ``owner_id`` in ``year``/``month``.

        Raises:
            ValidationError: If owner_id, year or month are malformed
            UserNotFound: If the users service does not know the owner
            UpstreamUnavailable: If the users service cannot be asked
            StorageError: If reading or writing a store fails
        """
        query = validate_report_query(owner_id, year, month)

        if not await self.users.exists(query.owner_id):
            raise UserNotFound(query.owner_id)

        period = month_period(query.year, query.month, self.tz)
        if not has_month_elapsed(query.year, query.month, now, self.tz):
            logger.debug(
                "Month still open, building live report",
                owner_id=query.owner_id,
                year=query.year,
                month=query.month,
            )
            return await self.build(query.owner_id, period)

        cached = await self.reports.find_by_key(query.owner_id, query.year, query.month)
        if cached is not None:
            logger.debug(
                "Serving stored report",
                owner_id=query.owner_id,
                year=query.year,
                month=query.month,
            )
            return cached

        report = await self.build(query.owner_id, period)
        stored = await self.reports.insert_if_absent(report)
        logger.info(
            "Stored report for elapsed month",
            owner_id=query.owner_id,
            year=query.year,
            month=query.month,
            categories=len(stored.categories),
        )
        return stored

    async def build(self, owner_id: int, period: MonthPeriod) -> MonthlyReport:
        grouped = await self.aggregator.aggregate(
            owner_id, period.year, period.month, period.start, period.end
        )
        return MonthlyReport(
            owner_id=owner_id,
            year=period.year,
            month=period.month,
            categories=merge_categories(grouped, MANDATORY_CATEGORIES),
        )
