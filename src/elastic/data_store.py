import logging
from typing import Any, Dict, List, Optional

from elasticsearch import Elasticsearch, NotFoundError

from .es_client import get_elasticsearch_client


logger = logging.getLogger(__name__)


def _text_with_keyword() -> Dict[str, Any]:
    # Same shape dynamic mapping gives strings, so term queries can use "<field>.keyword"
    return {
        "type": "text",
        "fields": {"keyword": {"type": "keyword", "ignore_above": 256}},
    }


EMPLOYEE_MAPPINGS: Dict[str, Any] = {
    "properties": {
        "id": {"type": "keyword"},
        "name": _text_with_keyword(),
        "dob": {"type": "date"},
        "address": {
            "properties": {
                "country": _text_with_keyword(),
                "town": _text_with_keyword(),
            }
        },
        "email": _text_with_keyword(),
        "skills": _text_with_keyword(),
        "experience": {"type": "integer"},
        "rating": {"type": "float"},
        "description": _text_with_keyword(),
        "verified": {"type": "boolean"},
        "salary": {"type": "integer"},
    }
}


class IndexManager:
    """Manages Elasticsearch index lifecycle and mapping for employee documents."""

    def __init__(self, client: Elasticsearch, name: str = "employees") -> None:
        self.client = client
        self.name = name

    def exists(self) -> bool:
        return bool(self.client.indices.exists(index=self.name))

    def ensure_index(self) -> None:
        if self.exists():
            return
        logger.info("Creating index '%s'.", self.name)
        self.client.indices.create(index=self.name, mappings=EMPLOYEE_MAPPINGS)

    def drop_index(self) -> None:
        if self.exists():
            logger.info("Dropping index '%s'.", self.name)
            self.client.indices.delete(index=self.name)
            logger.info("Index dropped successfully.")

    def reset_index(self) -> None:
        self.drop_index()
        self.ensure_index()

    def index_info(self) -> Dict[str, Any]:
        if not self.exists():
            return {"name": self.name, "exists": False, "documents": None, "mapping": {}}
        documents = self.client.count(index=self.name)["count"]
        mapping = self.client.indices.get_mapping(index=self.name)[self.name]["mappings"]
        return {
            "name": self.name,
            "exists": True,
            "documents": documents,
            "mapping": dict(mapping),
        }


class EmployeeStore:
    """Document primitives (index, get, delete, search, aggregate) over one index.

    Lifecycle is delegated to an IndexManager. Raw Elasticsearch hits are
    returned; mapping them to employee records is the service's job.
    """

    def __init__(
        self,
        client: Optional[Elasticsearch] = None,
        index: str = "employees",
        manager: Optional[IndexManager] = None,
        refresh: str = "wait_for",
        ensure_index: bool = True,
    ) -> None:
        # No readiness wait: an unreachable cluster fails fast on the first call
        self.client = client or get_elasticsearch_client(wait_ready=False)
        self.index_name = index
        self.manager = manager or IndexManager(self.client, name=self.index_name)
        self.refresh = refresh
        if ensure_index:
            self.manager.ensure_index()

    def reset(self) -> None:
        self.manager.reset_index()

    def index(self, doc_id: str, document: Dict[str, Any]) -> str:
        response = self.client.index(
            index=self.index_name, id=doc_id, document=document, refresh=self.refresh
        )
        logger.debug("Indexed '%s' into '%s': %s", doc_id, self.index_name, response["result"])
        return response["result"]

    def get(self, doc_id: str) -> Optional[Dict[str, Any]]:
        try:
            response = self.client.get(index=self.index_name, id=doc_id)
        except NotFoundError:
            return None
        return {"_id": response["_id"], "_source": response["_source"]}

    def delete(self, doc_id: str) -> str:
        try:
            response = self.client.delete(
                index=self.index_name, id=doc_id, refresh=self.refresh
            )
        except NotFoundError:
            # Raised both for a missing document and a missing index
            logger.debug("Delete of '%s' in '%s': not found", doc_id, self.index_name)
            return "not_found"
        return response["result"]

    def search(
        self,
        query: Optional[Dict[str, Any]] = None,
        *,
        from_: int = 0,
        size: int = 10,
    ) -> List[Dict[str, Any]]:
        try:
            response = self.client.search(
                index=self.index_name,
                query=query or {"match_all": {}},
                from_=from_,
                size=size,
            )
        except NotFoundError:
            logger.warning("Search on missing index '%s'", self.index_name)
            return []
        return list(response["hits"]["hits"])

    def aggregate(
        self, query: Dict[str, Any], aggs: Dict[str, Any]
    ) -> Dict[str, Any]:
        try:
            response = self.client.search(
                index=self.index_name, query=query, aggs=aggs, size=0
            )
        except NotFoundError:
            logger.warning("Aggregation on missing index '%s'", self.index_name)
            return {}
        return dict(response["aggregations"])
