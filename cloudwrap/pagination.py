"""
Bounded iteration over boto3 paginators.
"""

import logging
from typing import Any, Dict, Iterator, Optional, Type

from botocore.exceptions import BotoCoreError, ClientError

from .errors import BackendError, PaginationLimitError

logger = logging.getLogger(__name__)

DEFAULT_MAX_PAGES = 1000


class PageIterator:
    """
    Lazily walk a boto3 paginator, yielding items from every page.

    Each iteration starts a new paginator run, so one instance can be
    consumed more than once. The run ends on the first page without a
    ``NextToken``; a run that still has a token after ``max_pages`` pages
    raises instead of requesting more.

    Args:
        client: boto3 client, e.g. ``boto3.client('ssm')``
        operation_name: Paginated operation, e.g. ``'describe_parameters'``
        request: Keyword arguments passed to ``paginate``
        result_key: Response key holding the page's items
        error_cls: ``BackendError`` subclass wrapping botocore failures
        max_pages: Upper bound on requests; ``None`` disables the bound
    """

    def __init__(
        self,
        client,
        operation_name: str,
        request: Dict[str, Any],
        result_key: str,
        error_cls: Type[BackendError],
        max_pages: Optional[int] = DEFAULT_MAX_PAGES,
    ):
        self.client = client
        self.operation_name = operation_name
        self.request = dict(request)
        self.result_key = result_key
        self.error_cls = error_cls
        self.max_pages = max_pages

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        pages = 0
        try:
            paginator = self.client.get_paginator(self.operation_name)
            page_iterator = iter(paginator.paginate(**self.request))
        except (ClientError, BotoCoreError) as e:
            raise self.error_cls(e) from e

        while True:
            try:
                page = next(page_iterator, None)
            except (ClientError, BotoCoreError) as e:
                raise self.error_cls(e) from e
            if page is None:
                return
            pages += 1

            items = page.get(self.result_key) or []
            logger.debug(f"{self.error_cls.operation} page {pages}: {len(items)} items")
            yield from items

            if not page.get("NextToken"):
                return
            if self.max_pages is not None and pages >= self.max_pages:
                raise PaginationLimitError(self.error_cls.operation, self.max_pages)


def fetch_all_pages(*args, **kwargs) -> list:
    """Collect every item of a ``PageIterator`` built from the given arguments."""
    return list(PageIterator(*args, **kwargs))
