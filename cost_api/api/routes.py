from typing import Any

from fastapi import APIRouter, Body, Depends, status

from cost_api.api.deps import get_cost_service
from cost_api.core.errors import ValidationError
from cost_api.schemas.costs import Cost, OwnerTotal
from cost_api.schemas.reports import MonthlyReport
from cost_api.services.costs import CostService

router = APIRouter(prefix="/costs/api", tags=["costs"])


@router.post("/add", response_model=Cost, status_code=status.HTTP_201_CREATED)
async def add_cost(
    body: dict[str, Any] = Body(...),
    service: CostService = Depends(get_cost_service),
) -> Cost:
    return await service.add_record(
        description=body.get("description"),
        category=body.get("category"),
        owner_id=body.get("userid", body.get("owner_id")),
        amount=body.get("sum", body.get("amount")),
        occurred_at=body.get("date", body.get("occurred_at")),
    )


@router.get("", response_model=list[Cost])
async def list_costs(service: CostService = Depends(get_cost_service)) -> list[Cost]:
    return await service.list_all_records()


@router.get("/total/{userid}", response_model=OwnerTotal)
async def total_for_owner(
    userid: str, service: CostService = Depends(get_cost_service)
) -> OwnerTotal:
    return await service.total_for_owner(userid)


@router.get("/report", response_model=MonthlyReport)
async def monthly_report(
    userid: str | None = None,
    year: str | None = None,
    month: str | None = None,
    service: CostService = Depends(get_cost_service),
) -> MonthlyReport:
    if not userid or not year or not month:
        raise ValidationError("Missing required query parameters: userid, year, month")
    return await service.monthly_report(userid, year, month)


@router.get("/{userid}", response_model=list[Cost])
async def list_costs_for_owner(
    userid: str, service: CostService = Depends(get_cost_service)
) -> list[Cost]:
    return await service.list_records_for_owner(userid)
