"""
Pydantic schemas for operator endpoints.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class OperatorCreateRequest(BaseModel):
    """Request to create an operator (field app login)."""
    name: str = Field(..., min_length=1, max_length=200, examples=["João Silva"])
    login: str = Field(..., min_length=3, max_length=100, examples=["joao.silva"])
    password: str = Field(..., min_length=4, max_length=200)
    phone: Optional[str] = Field(None, max_length=30, examples=["+55 11 99999-0000"])
    truck_ids: List[int] = Field(default_factory=list, description="Trucks the operator may drive")
    project_ids: List[int] = Field(default_factory=list, description="Projects the operator works on")


class OperatorUpdateRequest(BaseModel):
    """Request to update an operator. Only provided fields are written."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    login: Optional[str] = Field(None, min_length=3, max_length=100)
    password: Optional[str] = Field(None, min_length=4, max_length=200)
    phone: Optional[str] = Field(None, max_length=30)


class OperatorLinksRequest(BaseModel):
    """Full replacement set of linked truck or project ids."""
    ids: List[int] = Field(default_factory=list)


class OperatorMutationResponse(BaseModel):
    status: str = Field(..., examples=["CREATED", "UPDATED", "DELETED"])
    operator_id: Optional[int] = None
    message: str
    warnings: List[str] = Field(default_factory=list)


class OperatorLinksResponse(BaseModel):
    operator_id: int
    linked: int


class OperatorListResponse(BaseModel):
    operators: List[Dict[str, Any]]
    count: int
