"""Employee application layer.

This package holds the service the API delegates to:
- CRUD over employee documents by id
- Field search (match or term)
- Filtered metric aggregation (avg, min, max)

Storage is handled by the elastic package; this layer only builds the
query bodies and maps hits back to Employee records.
"""

from .errors import (
    EmployeeNotFoundError,
    EmployeeServiceError,
    InvalidQueryTypeError,
    UnsupportedMetricTypeError,
)
from .schemas import Address, Employee
from .service import EmployeeService, EmployeeServiceConfig

__all__ = [
    "Address",
    "Employee",
    "EmployeeNotFoundError",
    "EmployeeService",
    "EmployeeServiceConfig",
    "EmployeeServiceError",
    "InvalidQueryTypeError",
    "UnsupportedMetricTypeError",
]
