"""
Pydantic schemas for fiscal periods.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field, model_validator

from erp_ledger.models.enums import FiscalPeriodStatus


class FiscalPeriodCreate(BaseModel):
    code: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=100)
    start_date: date
    end_date: date
    status: FiscalPeriodStatus = FiscalPeriodStatus.OPEN
    description: str = Field(default="", max_length=255)
    actor: str = Field(min_length=1, max_length=100)

    @model_validator(mode="after")
    def end_not_before_start(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class PeriodStatusChange(BaseModel):
    """Request to open or close a period."""
    actor: str = Field(min_length=1, max_length=100)


class FiscalPeriodResponse(BaseModel):
    id: int
    code: str
    name: str
    description: str
    start_date: date
    end_date: date
    status: FiscalPeriodStatus
    inserted_by: str
    inserted_at: datetime
    updated_by: str
    updated_at: datetime

    model_config = {"from_attributes": True}


class OpenPeriodCheck(BaseModel):
    checked_date: date
    is_open: bool
