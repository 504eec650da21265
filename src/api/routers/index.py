from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from elasticsearch import ApiError, TransportError
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from src.elastic.data_store import IndexManager
from src.employees import EmployeeService

from .employees import get_employee_service


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/index", tags=["index"])


class IndexInfo(BaseModel):
    name: str = Field(..., description="Index name")
    exists: bool = Field(..., description="Whether the index exists in the cluster")
    documents: Optional[int] = Field(
        None, description="Number of documents in the index, if it exists"
    )
    mapping: Dict[str, Any] = Field(
        default_factory=dict, description="Field mapping of the index"
    )


class IndexStatus(BaseModel):
    status: str = Field(..., description="Outcome of the operation")
    index: str = Field(..., description="Index name")


def _admin_failure(action: str, exc: Exception) -> HTTPException:
    logger.exception("Failed to %s index", action)
    return HTTPException(status_code=500, detail=f"Failed to {action} index: {exc}")


def get_index_manager(
    service: EmployeeService = Depends(get_employee_service),
) -> IndexManager:
    return service.store.manager


@router.get("", summary="Describe the employees index", response_model=IndexInfo)
def index_info(manager: IndexManager = Depends(get_index_manager)) -> IndexInfo:
    try:
        return IndexInfo(**manager.index_info())
    except (ApiError, TransportError) as e:
        raise _admin_failure("describe", e) from e


@router.post("", summary="Create the employees index if missing", response_model=IndexStatus)
def create_index(manager: IndexManager = Depends(get_index_manager)) -> IndexStatus:
    try:
        manager.ensure_index()
        return IndexStatus(status="ready", index=manager.name)
    except (ApiError, TransportError) as e:
        raise _admin_failure("create", e) from e


@router.post(
    "/reset",
    summary="Drop and recreate the employees index",
    response_model=IndexStatus,
)
def reset_index(manager: IndexManager = Depends(get_index_manager)) -> IndexStatus:
    try:
        manager.reset_index()
        return IndexStatus(status="reset", index=manager.name)
    except (ApiError, TransportError) as e:
        raise _admin_failure("reset", e) from e


@router.delete("", summary="Delete the employees index", response_model=IndexStatus)
def drop_index(manager: IndexManager = Depends(get_index_manager)) -> IndexStatus:
    try:
        manager.drop_index()
        return IndexStatus(status="dropped", index=manager.name)
    except (ApiError, TransportError) as e:
        raise _admin_failure("drop", e) from e
