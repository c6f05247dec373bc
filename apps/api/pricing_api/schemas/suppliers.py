"""
Supplier Pydantic schemas.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pricing_api.domain.errors import InvalidArgument
from pricing_api.domain.value_objects import LeadTime


class SupplierCreate(BaseModel):
    """Request model for creating a supplier."""
    name: str = Field(..., min_length=1, max_length=200)
    country: Optional[str] = Field(None, max_length=100)
    preferred: bool = False
    lead_time_days: int = 0

    @field_validator("lead_time_days")
    @classmethod
    def lead_time_valid(cls, v: int) -> int:
        try:
            return LeadTime.create(v).days
        except InvalidArgument as e:
            raise ValueError(str(e)) from e


class SupplierResponse(BaseModel):
    id: int
    name: str
    country: Optional[str] = None
    preferred: bool
    lead_time_days: int

    model_config = ConfigDict(from_attributes=True)


class SupplierListResponse(BaseModel):
    items: List[SupplierResponse]
    total: int
