from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Config:
    """Lookup namespace for one service in one environment."""
    environment: str
    service: str

    def as_path(self) -> str:
        return f"/{self.environment}/{self.service}/"
