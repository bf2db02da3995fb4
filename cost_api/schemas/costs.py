from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Matches the Numeric(18, 2) column the amounts are stored in.
AMOUNT_DECIMAL_PLACES = 2
MAX_AMOUNT = 10**16


class CostBase(BaseModel):
    description: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    owner_id: int = Field(..., gt=0, validation_alias="userid")
    amount: float = Field(..., gt=0, lt=MAX_AMOUNT, allow_inf_nan=False, validation_alias="sum")
    occurred_at: datetime | None = Field(None, validation_alias="date")

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    @field_validator("owner_id", mode="before")
    @classmethod
    def reject_boolean_owner(cls, v):
        if isinstance(v, bool):
            raise ValueError("userid must be a positive integer")
        return v

    @field_validator("amount")
    @classmethod
    def limit_decimal_places(cls, v: float) -> float:
        if Decimal(str(v)).as_tuple().exponent < -AMOUNT_DECIMAL_PLACES:
            raise ValueError(f"sum must have at most {AMOUNT_DECIMAL_PLACES} decimal places")
        return v


class CostCreate(CostBase):
    pass


class Cost(BaseModel):
    id: int
    description: str
    category: str
    owner_id: int
    amount: float
    occurred_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OwnerTotal(BaseModel):
    owner_id: int
    total: float
