"""
Parameter Store client.
"""

import logging
from typing import List, Optional

from .config import Config
from .errors import DescribeParametersError, GetParametersError
from .models import Parameter, ParameterMetadata
from .pagination import DEFAULT_MAX_PAGES, fetch_all_pages

logger = logging.getLogger(__name__)


class SsmClient:
    """Reads every parameter stored under a service namespace."""

    def __init__(self, client, max_pages: Optional[int] = DEFAULT_MAX_PAGES):
        self.client = client
        self.max_pages = max_pages

    @classmethod
    def from_settings(cls, settings) -> "SsmClient":
        return cls(settings.client("ssm"), max_pages=settings.max_pages)

    def describe_parameters(self, config: Config) -> List[ParameterMetadata]:
        """
        List metadata for parameters one level below the namespace path.

        Raises:
            DescribeParametersError: If any page request fails
            PaginationLimitError: If the page bound is exceeded
        """
        request = {
            "ParameterFilters": [
                {
                    "Key": "Path",
                    "Option": "OneLevel",
                    "Values": [config.as_path()],
                }
            ]
        }
        items = fetch_all_pages(
            self.client, "describe_parameters", request, "Parameters",
            DescribeParametersError, max_pages=self.max_pages,
        )
        logger.info(f"Described {len(items)} parameters under {config.as_path()}")
        return [ParameterMetadata.from_api(item) for item in items]

    def get_parameters(self, config: Config) -> List[Parameter]:
        """
        Fetch decrypted values for every parameter under the namespace path.

        Raises:
            GetParametersError: If any page request fails
            PaginationLimitError: If the page bound is exceeded
        """
        request = {
            "Path": config.as_path(),
            "Recursive": True,
            "WithDecryption": True,
        }
        items = fetch_all_pages(
            self.client, "get_parameters_by_path", request, "Parameters",
            GetParametersError, max_pages=self.max_pages,
        )
        logger.info(f"Fetched {len(items)} parameters under {config.as_path()}")
        return [Parameter.from_api(item) for item in items]
