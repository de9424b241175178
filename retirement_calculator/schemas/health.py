"""Pydantic schema for the health endpoint."""

from typing import Dict, Literal

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: Literal["UP", "DOWN"]
    message: str
    cache: Dict[str, bool]

    @property
    def is_up(self) -> bool:
        return self.status == "UP"
