from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field


class Address(BaseModel):
    country: Optional[str] = Field(None, description="Country of residence.")
    town: Optional[str] = Field(None, description="Town of residence.")


class Employee(BaseModel):
    id: Optional[str] = Field(
        None, description="Document id. Always taken from the path or the stored hit."
    )
    name: Optional[str] = Field(None, description="Full name.")
    dob: Optional[date] = Field(None, description="Date of birth (YYYY-MM-DD).")
    address: Optional[Address] = None
    email: Optional[str] = None
    skills: Optional[List[str]] = None
    experience: int = Field(0, description="Years of experience.")
    rating: float = 0.0
    description: Optional[str] = Field(None, description="Free-text description.")
    verified: bool = False
    salary: int = 0

    def to_document(self) -> dict:
        """Return the JSON body stored in the index (null fields omitted)."""
        return self.model_dump(mode="json", exclude_none=True)

    @classmethod
    def from_hit(cls, hit: dict) -> Optional["Employee"]:
        """Build an employee from an Elasticsearch hit, or None if it has no source."""
        source = hit.get("_source")
        if source is None:
            return None
        return cls.model_validate({**source, "id": hit.get("_id")})
