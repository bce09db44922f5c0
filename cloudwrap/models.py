"""
Records returned by Parameter Store and Secrets Manager.

Each record is an immutable snapshot of one API item. Listing calls produce
metadata records (``ParameterMetadata``, ``SecretEntry``) and value calls
produce value-bearing records (``Parameter``, ``SecretValue``).
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, NamedTuple, Optional, Union

from pydantic import BaseModel, Field


class ExportPair(NamedTuple):
    key: str
    value: str


@dataclass(frozen=True)
class ParameterMetadata:
    name: str
    version: Optional[int] = None
    last_modified_user: Optional[str] = None
    last_modified_date: Optional[datetime] = None
    type: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "ParameterMetadata":
        return cls(
            name=item.get("Name", ""),
            version=item.get("Version"),
            last_modified_user=item.get("LastModifiedUser"),
            last_modified_date=item.get("LastModifiedDate"),
            type=item.get("Type"),
            description=item.get("Description"),
        )


@dataclass(frozen=True)
class Parameter:
    name: str
    value: Optional[str] = None
    version: Optional[int] = None
    last_modified_date: Optional[datetime] = None
    type: Optional[str] = None
    arn: Optional[str] = None

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "Parameter":
        return cls(
            name=item.get("Name", ""),
            value=item.get("Value"),
            version=item.get("Version"),
            last_modified_date=item.get("LastModifiedDate"),
            type=item.get("Type"),
            arn=item.get("ARN"),
        )


@dataclass(frozen=True)
class SecretEntry:
    """A ListSecrets entry. Carries no value; fetch it by ``arn``."""
    name: str
    arn: Optional[str] = None
    rotation_enabled: Optional[bool] = None
    last_changed_date: Optional[datetime] = None
    deleted_date: Optional[datetime] = None
    description: Optional[str] = None

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "SecretEntry":
        return cls(
            name=item.get("Name", ""),
            arn=item.get("ARN"),
            rotation_enabled=item.get("RotationEnabled"),
            last_changed_date=item.get("LastChangedDate"),
            deleted_date=item.get("DeletedDate"),
            description=item.get("Description"),
        )


@dataclass(frozen=True)
class SecretValue:
    name: str
    arn: Optional[str] = None
    value: Optional[str] = None
    version_id: Optional[str] = None
    created_date: Optional[datetime] = None

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "SecretValue":
        return cls(
            name=item.get("Name", ""),
            arn=item.get("ARN"),
            value=item.get("SecretString"),
            version_id=item.get("VersionId"),
            created_date=item.get("CreatedDate"),
        )


Record = Union[ParameterMetadata, Parameter, SecretEntry, SecretValue]


class RecordKind(Enum):
    """Kinds of fetched records; decides table columns and exportability."""
    PARAMETER_METADATA = "parameter_metadata"
    PARAMETER = "parameter"
    SECRET_ENTRY = "secret_entry"
    SECRET_VALUE = "secret_value"

    @property
    def has_values(self) -> bool:
        return self in (RecordKind.PARAMETER, RecordKind.SECRET_VALUE)


class PostgresConfig(BaseModel):
    """Connection secret in the shape RDS writes for Postgres instances."""
    host: str
    port: int
    dbname: str
    username: str
    password: str
    engine: str
    db_instance_identifier: str = Field(alias="dbInstanceIdentifier")
