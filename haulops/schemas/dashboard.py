"""
Pydantic schemas for dashboard endpoints.

Daily volume points feed the transported-volume chart; trip lists feed the
ongoing-trips and history panels.
"""

from typing import Any, Dict, List, Literal

from pydantic import BaseModel, Field


class DailyVolumePoint(BaseModel):
    """Total transported volume for one calendar day."""
    date: str = Field(..., description="ISO-8601 calendar date (YYYY-MM-DD)")
    total_volume: float = Field(..., description="Sum of completed trip volumes that day")


class DailyVolumeResponse(BaseModel):
    """
    Response for GET /dashboard/daily-volume.

    ``source`` tells which strategy produced the points; the point shape is
    the same for all of them.
    """
    days: int = Field(..., description="Size of the trailing window, including today")
    source: Literal["server", "client", "placeholder"] = Field(
        ...,
        description="Strategy that produced the points"
    )
    points: List[DailyVolumePoint] = Field(..., description="One point per day, oldest first")

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "example": {
                "days": 3,
                "source": "client",
                "points": [
                    {"date": "2026-10-16", "total_volume": 0},
                    {"date": "2026-10-17", "total_volume": 10},
                    {"date": "2026-10-18", "total_volume": 5},
                ]
            }
        }


class TripListResponse(BaseModel):
    """Response for trip list endpoints."""
    trips: List[Dict[str, Any]] = Field(..., description="Trip rows with truck and project names")
    count: int = Field(..., description="Number of trips returned")
