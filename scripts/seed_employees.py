"""Seed the employees index with sample records.

Configuration via constants below (no CLI args). Run:
	python scripts/seed_employees.py

Environment:
	ELASTICSEARCH_URL  (default http://localhost:9200)
	EMPLOYEES_INDEX    (default employees)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
import sys
from typing import Dict, List

from elasticsearch import ApiError, TransportError

# Ensure repo root on path
CURRENT_DIR = Path(__file__).resolve().parent
ROOT_DIR = CURRENT_DIR.parent
if str(ROOT_DIR) not in sys.path:
	sys.path.insert(0, str(ROOT_DIR))

from src.employees import Employee, EmployeeService  # noqa: E402


# ---------------------------------------------------------------------------
# Configuration Constants
# ---------------------------------------------------------------------------
DATA_FILE: Path = ROOT_DIR / "data" / "sample_employees.json"
RESET_INDEX: bool = False
LOG_LEVEL: str = "INFO"


def load_employees(path: Path) -> Dict[str, Employee]:
	"""Read ``{id: employee}`` pairs from a JSON list of records carrying an ``id``."""
	records = json.loads(path.read_text(encoding="utf-8"))
	employees: Dict[str, Employee] = {}
	for record in records:
		employee_id = str(record.pop("id"))
		employees[employee_id] = Employee.model_validate(record)
	return employees


def seed(path: Path = DATA_FILE, reset: bool = RESET_INDEX) -> List[str]:
	"""Upsert every record in ``path``; returns the store outcome per record."""
	logger = logging.getLogger(__name__)

	service = EmployeeService()
	if reset:
		service.store.reset()

	outcomes: List[str] = []
	for employee_id, employee in load_employees(path).items():
		outcome = service.create_employee(employee_id, employee)
		outcomes.append(outcome)
		logger.info("%s -> %s", employee_id, outcome)
	logger.info(
		"Seeded %d employees into '%s'", len(outcomes), service.config.index_name
	)
	return outcomes


def main() -> int:
	logging.basicConfig(
		level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
		format="%(asctime)s %(levelname)s %(name)s - %(message)s",
	)
	try:
		seed()
		return 0
	except (ApiError, TransportError, ConnectionError) as e:  # pragma: no cover
		logging.exception("Seeding failed: %s", e)
		return 1

if __name__ == "__main__":  # pragma: no cover
	raise SystemExit(main())
