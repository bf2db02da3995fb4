from __future__ import annotations

from functools import lru_cache

from cost_api.core.config import get_settings
from cost_api.db.session import get_sessionmaker
from cost_api.services.costs import CostService
from cost_api.services.stores import SqlRecordStore, SqlReportStore
from cost_api.services.users import HttpUserDirectory


@lru_cache
def get_cost_service() -> CostService:
    settings = get_settings()
    sessions = get_sessionmaker()
    return CostService(
        records=SqlRecordStore(sessions),
        reports=SqlReportStore(sessions),
        users=HttpUserDirectory(settings.user_service_url, timeout=settings.user_service_timeout),
        tz=settings.tzinfo,
    )
