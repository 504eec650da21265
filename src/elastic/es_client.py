import os
import time
from typing import Optional

from dotenv import load_dotenv
from elasticsearch import Elasticsearch

load_dotenv(override=True)


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() not in ("0", "false", "no", "off")


def get_elasticsearch_client(
    url: Optional[str] = None,
    api_key: Optional[str] = None,
    wait_ready: bool = True,
    retries: int = 10,
    backoff_sec: float = 1.0,
) -> Elasticsearch:
    """Create an Elasticsearch client using env defaults if not provided and optionally wait for readiness.

    Env overrides:
      - ELASTICSEARCH_URL (default http://localhost:9200)
      - ELASTICSEARCH_API_KEY (optional)
      - ELASTICSEARCH_USERNAME / ELASTICSEARCH_PASSWORD (optional, basic auth)
      - ELASTICSEARCH_VERIFY_CERTS (default true)
    """
    url = url or os.environ.get("ELASTICSEARCH_URL", "http://localhost:9200")
    api_key = api_key or os.environ.get("ELASTICSEARCH_API_KEY") or None
    username = os.environ.get("ELASTICSEARCH_USERNAME")
    password = os.environ.get("ELASTICSEARCH_PASSWORD")

    kwargs = {"verify_certs": _env_flag("ELASTICSEARCH_VERIFY_CERTS", True)}
    if api_key:
        kwargs["api_key"] = api_key
    elif username and password:
        kwargs["basic_auth"] = (username, password)
    client = Elasticsearch(url, **kwargs)

    if wait_ready:
        attempts = max(1, retries)
        for i in range(attempts):
            # ping() returns False rather than raising when the node is down
            if client.ping():
                break
            if i == attempts - 1:
                raise ConnectionError(f"Elasticsearch at {url} is not reachable")
            time.sleep(backoff_sec)
    return client
