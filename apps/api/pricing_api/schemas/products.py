"""
Product Pydantic schemas.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field


class ProductCreate(BaseModel):
    """Request model for registering a product."""
    sku: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=200)
    unit_of_measure: str = Field("EA", min_length=1, max_length=10)
    hazard_class: Optional[str] = Field(None, max_length=50)


class ProductResponse(BaseModel):
    id: int
    sku: str
    name: str
    unit_of_measure: str
    hazard_class: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def is_hazardous(self) -> bool:
        return bool(self.hazard_class and self.hazard_class.strip())


class ProductListResponse(BaseModel):
    items: List[ProductResponse]
    total: int
