"""
Pydantic schemas for project and client endpoints.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

ProjectStatus = Literal["active", "completed"]


class ProjectCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200, examples=["Aterro Rodoanel Lote 3"])
    client_id: Optional[int] = None
    location: Optional[str] = Field(None, max_length=300)
    status: ProjectStatus = "active"


class ProjectUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    client_id: Optional[int] = None
    location: Optional[str] = Field(None, max_length=300)
    status: Optional[ProjectStatus] = None


class ProjectResponse(BaseModel):
    project: Dict[str, Any]


class ProjectListResponse(BaseModel):
    projects: List[Dict[str, Any]]
    count: int


class ClientListResponse(BaseModel):
    clients: List[Dict[str, Any]]
    count: int
