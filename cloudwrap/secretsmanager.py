"""
Secrets Manager client.
"""

import logging
from typing import List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from .config import Config
from .errors import GetSecretValueError, InvalidKeyError, ListSecretsError, MissingFieldError
from .models import SecretEntry, SecretValue
from .pagination import DEFAULT_MAX_PAGES, fetch_all_pages

logger = logging.getLogger(__name__)


class SecretsManagerClient:
    """Lists and reads the secrets stored under a service namespace."""

    def __init__(self, client, max_pages: Optional[int] = DEFAULT_MAX_PAGES):
        self.client = client
        self.max_pages = max_pages

    @classmethod
    def from_settings(cls, settings) -> "SecretsManagerClient":
        return cls(settings.client("secretsmanager"), max_pages=settings.max_pages)

    def list_secrets(self, config: Config) -> List[SecretEntry]:
        """
        List live secrets whose name starts with ``<namespace>/``.

        ListSecrets has no server-side path filter, so every page is read
        and the result is filtered locally. Soft-deleted secrets are dropped.

        Raises:
            ListSecretsError: If any page request fails
        """
        items = fetch_all_pages(
            self.client, "list_secrets", {}, "SecretList",
            ListSecretsError, max_pages=self.max_pages,
        )
        prefix = f"{config.as_path()}/"
        secrets = [
            entry for entry in (SecretEntry.from_api(item) for item in items)
            if entry.deleted_date is None and entry.name.startswith(prefix)
        ]
        logger.info(f"Listed {len(items)} secrets, {len(secrets)} under {prefix}")
        return secrets

    def get_secret_value(self, config: Config, key: str) -> SecretValue:
        """
        Fetch the value of the single secret named ``<namespace>/<key>``.

        Raises:
            InvalidKeyError: If no live secret has that name
            GetSecretValueError: If fetching the value fails
        """
        full_key = f"{config.as_path()}/{key}"
        for secret in self.list_secrets(config):
            if secret.name == full_key:
                return self._fetch(secret)

        raise InvalidKeyError(full_key)

    def get_secret_values(self, config: Config) -> List[SecretValue]:
        """
        Fetch the value of every secret under the namespace, one at a time.

        The first failure aborts the whole call.
        """
        return [self._fetch(secret) for secret in self.list_secrets(config)]

    def _fetch(self, secret: SecretEntry) -> SecretValue:
        if not secret.arn:
            raise MissingFieldError(f"secret {secret.name}", "ARN")

        logger.debug(f"Fetching secret value for {secret.name}")
        try:
            response = self.client.get_secret_value(SecretId=secret.arn)
        except (ClientError, BotoCoreError) as e:
            raise GetSecretValueError(e) from e
        return SecretValue.from_api(response)
