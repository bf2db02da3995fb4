from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from typing import Any, Callable

from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from cost_api.core.errors import MonthPassedError, UserNotFound, ValidationError
from cost_api.schemas.costs import Cost, CostCreate, OwnerTotal
from cost_api.schemas.reports import MonthlyReport
from cost_api.services.base import RecordStore, ReportStore, UserDirectory
from cost_api.services.periods import has_month_passed, localize
from cost_api.services.reports import ReportCache


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _positive_owner(owner_id: Any) -> int:
    if isinstance(owner_id, bool) or not isinstance(owner_id, (int, str)):
        raise ValidationError("userid must be a positive number")
    text = str(owner_id).strip()
    if not (text.isascii() and text.isdigit()) or int(text) <= 0:
        raise ValidationError("userid must be a positive number")
    return int(text)


class CostService:
    """Operations exposed to the HTTP layer."""

    def __init__(
        self,
        records: RecordStore,
        reports: ReportStore,
        users: UserDirectory,
        tz: tzinfo,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.records = records
        self.users = users
        self.tz = tz
        self.clock = clock
        self.report_cache = ReportCache(records, reports, users, tz)

    async def add_record(
        self,
        description: Any,
        category: Any,
        owner_id: Any,
        amount: Any,
        occurred_at: Any = None,
    ) -> Cost:
        try:
            payload = CostCreate(
                description=description,
                category=category,
                owner_id=owner_id,
                amount=amount,
                occurred_at=occurred_at,
            )
        except PydanticValidationError as exc:
            raise ValidationError.from_pydantic(exc) from exc

        now = self.clock()
        occurred = localize(payload.occurred_at or now, self.tz)
        if has_month_passed(occurred, now, self.tz):
            logger.info(
                "Rejected cost dated in an elapsed month",
                owner_id=payload.owner_id,
                occurred_at=occurred.isoformat(),
            )
            raise MonthPassedError()

        if not await self.users.exists(payload.owner_id):
            raise UserNotFound(payload.owner_id)

        saved = await self.records.insert(payload.model_copy(update={"occurred_at": occurred}))
        logger.info(
            "Cost recorded",
            cost_id=saved.id,
            owner_id=saved.owner_id,
            category=saved.category,
        )
        return saved

    async def list_all_records(self) -> list[Cost]:
        return await self.records.list_all()

    async def list_records_for_owner(self, owner_id: Any) -> list[Cost]:
        return await self.records.list_for_owner(_positive_owner(owner_id))

    async def total_for_owner(self, owner_id: Any) -> OwnerTotal:
        owner = _positive_owner(owner_id)
        total = await self.records.total_for_owner(owner)
        return OwnerTotal(owner_id=owner, total=total)

    async def monthly_report(self, owner_id: Any, year: Any, month: Any) -> MonthlyReport:
        return await self.report_cache.get_report(owner_id, year, month, self.clock())
