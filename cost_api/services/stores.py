from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cost_api.core.errors import StorageError
from cost_api.db import models
from cost_api.schemas.costs import Cost, CostCreate
from cost_api.schemas.reports import MonthlyReport
from cost_api.services.base import RecordStore, ReportStore


class SqlRecordStore(RecordStore):
    def __init__(self, sessions: async_sessionmaker[AsyncSession]):
        self.sessions = sessions

    async def find(self, owner_id: int, start: datetime, end: datetime) -> list[Cost]:
        stmt = (
            select(models.Cost)
            .where(
                models.Cost.owner_id == owner_id,
                models.Cost.occurred_at >= start,
                models.Cost.occurred_at < end,
            )
            .order_by(models.Cost.occurred_at, models.Cost.id)
        )
        return await self._fetch(stmt)

    async def insert(self, record: CostCreate) -> Cost:
        cost = models.Cost(
            description=record.description,
            category=record.category,
            owner_id=record.owner_id,
            amount=Decimal(str(record.amount)),
            occurred_at=record.occurred_at,
        )
        try:
            async with self.sessions() as session:
                session.add(cost)
                await session.commit()
                await session.refresh(cost)
        except SQLAlchemyError as exc:
            logger.exception("Failed to store cost", owner_id=record.owner_id)
            raise StorageError(f"Failed to store cost: {exc}") from exc
        return _cost_to_schema(cost)

    async def list_all(self) -> list[Cost]:
        return await self._fetch(select(models.Cost).order_by(models.Cost.id))

    async def list_for_owner(self, owner_id: int) -> list[Cost]:
        stmt = select(models.Cost).where(models.Cost.owner_id == owner_id).order_by(models.Cost.id)
        return await self._fetch(stmt)

    async def total_for_owner(self, owner_id: int) -> float:
        stmt = select(func.coalesce(func.sum(models.Cost.amount), 0)).where(
            models.Cost.owner_id == owner_id
        )
        try:
            async with self.sessions() as session:
                total = await session.scalar(stmt)
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to total costs: {exc}") from exc
        return float(total or 0)

    async def _fetch(self, stmt) -> list[Cost]:
        try:
            async with self.sessions() as session:
                result = await session.execute(stmt)
                rows = result.scalars().all()
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to read costs: {exc}") from exc
        return [_cost_to_schema(row) for row in rows]


class SqlReportStore(ReportStore):
    def __init__(self, sessions: async_sessionmaker[AsyncSession]):
        self.sessions = sessions

    async def find_by_key(self, owner_id: int, year: int, month: int) -> MonthlyReport | None:
        stmt = select(models.Report).where(
            models.Report.owner_id == owner_id,
            models.Report.year == year,
            models.Report.month == month,
        )
        try:
            async with self.sessions() as session:
                row = await session.scalar(stmt)
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to read report: {exc}") from exc
        return _report_to_schema(row) if row is not None else None

    async def insert_if_absent(self, report: MonthlyReport) -> MonthlyReport:
        row = models.Report(
            owner_id=report.owner_id,
            year=report.year,
            month=report.month,
            categories=report.model_dump(mode="json")["categories"],
        )
        try:
            async with self.sessions() as session:
                session.add(row)
                await session.commit()
        except IntegrityError:
            # Another request stored this key first; its report wins.
            logger.info(
                "Report already stored by a concurrent request",
                owner_id=report.owner_id,
                year=report.year,
                month=report.month,
            )
            winner = await self.find_by_key(report.owner_id, report.year, report.month)
            if winner is None:
                raise StorageError("Report insert conflicted but no stored report was found")
            return winner
        except SQLAlchemyError as exc:
            logger.exception("Failed to store report", owner_id=report.owner_id)
            raise StorageError(f"Failed to store report: {exc}") from exc
        return report


def _cost_to_schema(cost: models.Cost) -> Cost:
    return Cost(
        id=cost.id,
        description=cost.description,
        category=cost.category,
        owner_id=cost.owner_id,
        amount=float(cost.amount),
        occurred_at=cost.occurred_at,
    )


def _report_to_schema(row: models.Report) -> MonthlyReport:
    return MonthlyReport(
        owner_id=row.owner_id,
        year=row.year,
        month=row.month,
        categories=row.categories,
    )
