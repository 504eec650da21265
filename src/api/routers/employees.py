from __future__ import annotations

import logging
from functools import lru_cache
from typing import List, Optional

from elasticsearch import ApiError, BadRequestError, TransportError
from fastapi import APIRouter, Body, Depends, HTTPException, Query
from fastapi.responses import PlainTextResponse

from src.employees import (
    Employee,
    EmployeeNotFoundError,
    EmployeeService,
    EmployeeServiceError,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/employees", tags=["employees"])

STORE_ERRORS = (ApiError, TransportError)

EMPLOYEE_EXAMPLE = {
    "name": "Ana Brown",
    "dob": "1993-03-19",
    "address": {"country": "Belarus", "town": "Gomel"},
    "email": "anabrown9@gmail.com",
    "skills": ["Java", "AWS"],
    "experience": 10,
    "rating": 9.2,
    "description": "confident, ambitious, highly motivated Java experience interview learning python",
    "verified": True,
    "salary": 30000,
}


def _store_failure(action: str, exc: Exception) -> HTTPException:
    logger.exception("%s failed", action)
    return HTTPException(status_code=500, detail=f"{action} failed: {exc}")


@lru_cache(maxsize=1)
def _build_employee_service() -> EmployeeService:
    return EmployeeService()


def get_employee_service() -> EmployeeService:
    # Failed builds are not cached; the next request retries the connection
    try:
        return _build_employee_service()
    except (ConnectionError, ApiError, TransportError) as exc:
        raise _store_failure("Connect", exc) from exc


@router.get(
    "",
    summary="Get all employees",
    response_model=List[Employee],
    response_model_exclude_none=True,
)
def list_employees(
    page: int = Query(0, ge=0, description="The page number (0-based index)"),
    size: int = Query(
        10, ge=1, le=10000, description="The size of the page (employees per page)"
    ),
    service: EmployeeService = Depends(get_employee_service),
) -> List[Employee]:
    """Retrieve a page of employees. Default page size is 10."""
    try:
        return service.list_employees(page, size)
    except STORE_ERRORS as exc:
        raise _store_failure("List employees", exc) from exc


@router.get(
    "/search",
    summary="Search employees",
    response_model=List[Employee],
    response_model_exclude_none=True,
)
def search_employees(
    field: str = Query(..., description="Field to search in", examples=["skills"]),
    value: str = Query(
        ..., description="Value to search for in the specified field", examples=["Java"]
    ),
    query_type: str = Query(
        ...,
        alias="queryType",
        description="Type of query to use: 'match' or 'term'",
        examples=["match"],
    ),
    service: EmployeeService = Depends(get_employee_service),
) -> List[Employee]:
    """Search for employees by a specific field, value, and query type."""
    try:
        return service.search_employees(field, value, query_type)
    except EmployeeServiceError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except STORE_ERRORS as exc:
        raise _store_failure("Search", exc) from exc


@router.get(
    "/aggregate",
    summary="Aggregate employees",
    response_model=Optional[float],
)
def aggregate_employees(
    field: str = Query(..., description="Field to filter by (e.g. skills)"),
    field_value: str = Query(
        ..., alias="fieldValue", description="Value for the filter field (e.g. Java)"
    ),
    metric_type: str = Query(
        ..., alias="metricType", description="Metric to compute: avg, min or max"
    ),
    metric_field: str = Query(
        ...,
        alias="metricField",
        description="Numeric field to apply the metric on (e.g. salary, experience)",
    ),
    service: EmployeeService = Depends(get_employee_service),
) -> Optional[float]:
    """Compute avg/min/max of a numeric field over employees matching a filter.

    Returns null when no employee matches.
    """
    try:
        return service.aggregate_employees(field, field_value, metric_type, metric_field)
    except EmployeeServiceError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except STORE_ERRORS as exc:
        raise _store_failure("Aggregation", exc) from exc


@router.get(
    "/{employee_id}",
    summary="Get employee by ID",
    response_model=Employee,
    response_model_exclude_none=True,
)
def get_employee(
    employee_id: str,
    service: EmployeeService = Depends(get_employee_service),
) -> Employee:
    try:
        return service.get_employee(employee_id)
    except EmployeeNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except STORE_ERRORS as exc:
        raise _store_failure("Get employee", exc) from exc


@router.post(
    "/{employee_id}",
    summary="Create a new employee",
    response_class=PlainTextResponse,
)
def create_employee(
    employee_id: str,
    employee: Employee = Body(..., examples=[EMPLOYEE_EXAMPLE]),
    service: EmployeeService = Depends(get_employee_service),
) -> str:
    """Create or replace the employee stored under ``employee_id``.

    Responds with the store outcome: ``created`` or ``updated``.
    """
    try:
        return service.create_employee(employee_id, employee)
    except BadRequestError as exc:
        # Document rejected by the index mapping
        raise HTTPException(status_code=400, detail=f"Invalid employee: {exc}") from exc
    except STORE_ERRORS as exc:
        raise _store_failure("Create employee", exc) from exc


@router.delete(
    "/{employee_id}",
    summary="Delete employee by ID",
    response_class=PlainTextResponse,
)
def delete_employee(
    employee_id: str,
    service: EmployeeService = Depends(get_employee_service),
) -> str:
    """Responds with ``deleted``, or ``not_found`` when there is nothing to delete."""
    try:
        return service.delete_employee(employee_id)
    except STORE_ERRORS as exc:
        raise _store_failure("Delete employee", exc) from exc
