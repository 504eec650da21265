"""
Shared pytest fixtures.

- An in-memory store exposing the same primitives as EmployeeStore
  (index, get, delete, search, aggregate) so the service and the API run
  without an Elasticsearch node.
- A TestClient wired to that store through dependency overrides.
"""

import os
import re
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("LOG_LEVEL", "DEBUG")

from src.api.app import app  # noqa: E402
from src.api.routers.employees import get_employee_service  # noqa: E402
from src.employees import EmployeeService, EmployeeServiceConfig  # noqa: E402


_TOKEN = re.compile(r"\w+")


def _resolve(source: Dict[str, Any], path: str) -> Any:
    value: Any = source
    for part in path.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def _values(source: Dict[str, Any], path: str) -> List[Any]:
    value = _resolve(source, path)
    if value is None:
        return []
    return value if isinstance(value, list) else [value]


def _tokens(value: Any) -> set:
    return {t.lower() for t in _TOKEN.findall(str(value))}


class InMemoryEmployeeStore:
    """Dictionary-backed stand-in for EmployeeStore.

    Understands the query shapes the service emits: match_all, match on a
    text field (lowercased word tokens) and term on a ``.keyword`` field
    (exact value).
    """

    def __init__(self) -> None:
        self.documents: Dict[str, Dict[str, Any]] = {}

    def index(self, doc_id: str, document: Dict[str, Any]) -> str:
        result = "updated" if doc_id in self.documents else "created"
        self.documents[doc_id] = dict(document)
        return result

    def get(self, doc_id: str) -> Optional[Dict[str, Any]]:
        if doc_id not in self.documents:
            return None
        return {"_id": doc_id, "_source": dict(self.documents[doc_id])}

    def delete(self, doc_id: str) -> str:
        if self.documents.pop(doc_id, None) is None:
            return "not_found"
        return "deleted"

    def search(self, query=None, *, from_: int = 0, size: int = 10) -> List[Dict[str, Any]]:
        hits = [
            {"_id": doc_id, "_source": dict(source)}
            for doc_id, source in self.documents.items()
            if self._matches(source, query)
        ]
        return hits[from_:from_ + size]

    def aggregate(self, query, aggs) -> Dict[str, Any]:
        matching = [s for s in self.documents.values() if self._matches(s, query)]
        results: Dict[str, Any] = {}
        for name, spec in aggs.items():
            (metric, params), = spec.items()
            numbers = [
                v for s in matching for v in _values(s, params["field"])
                if isinstance(v, (int, float))
            ]
            if not numbers:
                value = None
            elif metric == "avg":
                value = sum(numbers) / len(numbers)
            elif metric == "min":
                value = min(numbers)
            else:
                value = max(numbers)
            results[name] = {"value": value}
        return results

    def _matches(self, source: Dict[str, Any], query: Optional[Dict[str, Any]]) -> bool:
        if not query or "match_all" in query:
            return True
        if "match" in query:
            (field, params), = query["match"].items()
            wanted = _tokens(params["query"])
            return any(wanted & _tokens(v) for v in _values(source, field))
        if "term" in query:
            (field, params), = query["term"].items()
            if not field.endswith(".keyword"):
                return False
            return any(
                v == params["value"]
                for v in _values(source, field[: -len(".keyword")])
            )
        raise AssertionError(f"Unexpected query: {query}")


@pytest.fixture
def store() -> InMemoryEmployeeStore:
    return InMemoryEmployeeStore()


@pytest.fixture
def service(store) -> EmployeeService:
    return EmployeeService(
        config=EmployeeServiceConfig(index_name="employees-test"), store=store
    )


@pytest.fixture
def client(service):
    app.dependency_overrides[get_employee_service] = lambda: service
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def ana() -> Dict[str, Any]:
    return {
        "name": "Ana Brown",
        "dob": "1993-03-19",
        "address": {"country": "Belarus", "town": "Gomel"},
        "email": "anabrown9@gmail.com",
        "skills": ["Java", "AWS"],
        "experience": 10,
        "rating": 9.2,
        "description": "confident, ambitious, highly motivated Java experience",
        "verified": True,
        "salary": 30000,
    }
