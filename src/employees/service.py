from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from src.elastic.data_store import EmployeeStore

from .errors import (
    EmployeeNotFoundError,
    InvalidQueryTypeError,
    UnsupportedMetricTypeError,
)
from .schemas import Employee


logger = logging.getLogger(__name__)

METRIC_TYPES = ("avg", "min", "max")
# Elasticsearch default index.max_result_window; from + size may not exceed it
MAX_RESULT_WINDOW = 10000
KEYWORD_SUFFIX = ".keyword"


@dataclass(frozen=True)
class EmployeeServiceConfig:
    index_name: str = field(
        default_factory=lambda: os.getenv("EMPLOYEES_INDEX", "employees")
    )
    refresh: str = field(
        default_factory=lambda: os.getenv("EMPLOYEES_REFRESH", "wait_for")
    )


def keyword_field(field_name: str) -> str:
    """Return the untokenized variant of a field ("skills" -> "skills.keyword")."""
    if field_name.endswith(KEYWORD_SUFFIX):
        return field_name
    return field_name + KEYWORD_SUFFIX


class EmployeeService:
    """Application-layer employee service.

    Implements:
      1) CRUD by id (list, get, create/replace, delete)
      2) Field search with a match or term query
      3) A filtered avg/min/max metric over a numeric field

    Query and aggregation bodies are built here; executing them is left to
    the store.
    """

    def __init__(
        self,
        config: EmployeeServiceConfig | None = None,
        store: Optional[EmployeeStore] = None,
    ):
        self.config = config or EmployeeServiceConfig()
        self.store = store or EmployeeStore(
            index=self.config.index_name, refresh=self.config.refresh
        )

    def list_employees(self, page: int = 0, size: int = 10) -> List[Employee]:
        offset = page * size
        if offset >= MAX_RESULT_WINDOW:
            return []
        size = min(size, MAX_RESULT_WINDOW - offset)
        hits = self.store.search(None, from_=offset, size=size)
        return self._to_employees(hits)

    def get_employee(self, employee_id: str) -> Employee:
        hit = self.store.get(employee_id)
        employee = Employee.from_hit(hit) if hit else None
        if employee is None:
            raise EmployeeNotFoundError(employee_id)
        return employee

    def create_employee(self, employee_id: str, employee: Employee) -> str:
        document = employee.model_copy(update={"id": employee_id}).to_document()
        result = self.store.index(employee_id, document)
        logger.info("Employee '%s' %s", employee_id, result)
        return result

    def delete_employee(self, employee_id: str) -> str:
        result = self.store.delete(employee_id)
        logger.info("Delete employee '%s': %s", employee_id, result)
        return result

    def search_employees(
        self, field_name: str, value: str, query_type: str
    ) -> List[Employee]:
        query = self.build_search_query(field_name, value, query_type)
        hits = self.store.search(query)
        return self._to_employees(hits)

    def aggregate_employees(
        self,
        field_name: str,
        field_value: str,
        metric_type: str,
        metric_field: str,
    ) -> Optional[float]:
        metric = self._normalize_metric(metric_type)
        aggregation_name = f"{metric_type}_{metric_field}"
        query = {"term": {keyword_field(field_name): {"value": field_value}}}
        aggs = {aggregation_name: {metric: {"field": metric_field}}}

        results = self.store.aggregate(query, aggs)
        aggregate = results.get(aggregation_name) or {}
        value = aggregate.get("value")
        return float(value) if value is not None else None

    def build_search_query(
        self, field_name: str, value: str, query_type: str
    ) -> Dict[str, Any]:
        """Build a match or term query for a single field.

        match: full-text, analyzed against ``field_name``.
        term: exact value against ``field_name``'s keyword sub-field.
        """
        kind = (query_type or "").strip().lower()
        if kind == "match":
            return {"match": {field_name: {"query": value}}}
        if kind == "term":
            return {"term": {keyword_field(field_name): {"value": value}}}
        raise InvalidQueryTypeError(query_type)

    def _normalize_metric(self, metric_type: str) -> str:
        metric = (metric_type or "").strip().lower()
        if metric not in METRIC_TYPES:
            raise UnsupportedMetricTypeError(metric_type)
        return metric

    def _to_employees(self, hits: List[Dict[str, Any]]) -> List[Employee]:
        employees = [Employee.from_hit(hit) for hit in hits]
        return [e for e in employees if e is not None]
