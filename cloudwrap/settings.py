"""
Runtime settings and AWS client construction.

Values come from CLI options, each of which falls back to an environment
variable (``CLOUDWRAP_REGION``, ``AWS_PROFILE``, ``CLOUDWRAP_MAX_PAGES``,
``CLOUDWRAP_DB_CLIENT``).
"""

from dataclasses import dataclass
from typing import Optional

import boto3

from .pagination import DEFAULT_MAX_PAGES

DEFAULT_REGION = "us-east-1"
DEFAULT_DB_CLIENT = "psql"


@dataclass
class Settings:
    """Options shared by every subcommand."""
    region: str = DEFAULT_REGION
    profile: Optional[str] = None
    max_pages: Optional[int] = DEFAULT_MAX_PAGES

    def session(self) -> boto3.Session:
        return boto3.Session(region_name=self.region, profile_name=self.profile)

    def client(self, service_name: str):
        return self.session().client(service_name)


def parse_max_pages(value: int) -> Optional[int]:
    """
    Normalize a page bound. ``0`` disables the bound.

    Raises:
        ValueError: If the bound is negative
    """
    if value < 0:
        raise ValueError(f"max pages must not be negative: {value}")
    return value or None
