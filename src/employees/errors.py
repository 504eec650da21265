class EmployeeServiceError(Exception):
    """Base class for errors raised by the employee service."""


class InvalidQueryTypeError(EmployeeServiceError, ValueError):
    def __init__(self, query_type: str) -> None:
        super().__init__(
            f"Invalid query type '{query_type}'. Use 'match' or 'term'."
        )
        self.query_type = query_type


class UnsupportedMetricTypeError(EmployeeServiceError, ValueError):
    def __init__(self, metric_type: str) -> None:
        super().__init__(
            f"Unsupported metric type '{metric_type}'. Use 'avg', 'min', or 'max'."
        )
        self.metric_type = metric_type


class EmployeeNotFoundError(EmployeeServiceError, LookupError):
    def __init__(self, employee_id: str) -> None:
        super().__init__(f"Employee {employee_id} not found")
        self.employee_id = employee_id
