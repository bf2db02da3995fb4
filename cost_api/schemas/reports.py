from pydantic import BaseModel, Field, field_validator


class ReportQuery(BaseModel):
    owner_id: int = Field(..., gt=0)
    year: int = Field(..., ge=1, le=9998)
    month: int = Field(..., ge=1, le=12)

    @field_validator("owner_id", "year", "month", mode="before")
    @classmethod
    def reject_booleans(cls, v):
        if isinstance(v, bool):
            raise ValueError("must be an integer, not a boolean")
        return v


class CategoryEntry(BaseModel):
    amount: float
    description: str
    day: int = Field(..., ge=1, le=31)


class MonthlyReport(BaseModel):
    owner_id: int
    year: int
    month: int
    categories: list[dict[str, list[CategoryEntry]]]

    def category_names(self) -> list[str]:
        return [name for block in self.categories for name in block]
