"""Identity store value objects."""
from typing import List

from pydantic import BaseModel, Field


class LoadReport(BaseModel):
    """Summary of hydrating the repository from durable storage."""
    loaded: int = Field(0, description="Number of identities loaded")
    skipped: int = Field(0, description="Number of records skipped as unreadable")
    storage_corrupt: bool = Field(False, description="Whole store unreadable, started empty")
    warnings: List[str] = Field(default_factory=list, description="Human-readable warnings")

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)
