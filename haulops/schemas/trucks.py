"""
Pydantic schemas for truck endpoints.

Requests always use canonical (snake_case) field names; the service layer
maps them onto whatever columns the live ``trucks`` table has.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class TruckCreateRequest(BaseModel):
    """Request to create a truck."""
    name: str = Field(..., min_length=1, max_length=200, examples=["Caçamba 07"])
    load_volume: Optional[float] = Field(
        None,
        ge=0,
        description="Load capacity in cubic meters",
        examples=[12]
    )
    plate_number: Optional[str] = Field(None, max_length=20, examples=["ABC1D23"])
    current_project: Optional[str] = Field(
        None,
        description="Project currently served (project id as text)",
        examples=["14"]
    )
    status: Optional[str] = Field(None, max_length=50)


class TruckUpdateRequest(BaseModel):
    """Request to update a truck. Only provided fields are written."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    load_volume: Optional[float] = Field(None, ge=0)
    plate_number: Optional[str] = Field(None, max_length=20)
    current_project: Optional[str] = Field(None)
    status: Optional[str] = Field(None, max_length=50)


class TruckResponse(BaseModel):
    """Response wrapping a single truck row as stored."""
    truck: Dict[str, Any] = Field(..., description="Truck row with live column names")


class TruckListResponse(BaseModel):
    trucks: List[Dict[str, Any]]
    count: int


class SchemaCheckResponse(BaseModel):
    """
    Response for GET /trucks/schema.

    ``degraded`` is true when the schema could not be verified and the
    legacy column names are being assumed.
    """
    columns: Dict[str, bool] = Field(..., description="Column availability flags")
    missing: List[str] = Field(
        default_factory=list,
        description="Column pairs with neither variant present"
    )
    degraded: bool = Field(False, description="Schema verification unavailable")
    message: Optional[str] = None


class SchemaRepairResponse(BaseModel):
    repaired: bool
