"""
Table rendering and export normalization for fetched records.
"""

import io
import json
import math
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Union

from pydantic import ValidationError
from rich import box
from rich.console import Console
from rich.table import Table

from .errors import MissingFieldError, ShellConfigError
from .models import (
    ExportPair, Parameter, ParameterMetadata, PostgresConfig, Record, RecordKind, SecretEntry, SecretValue,
)

VALUE_COLUMNS = ("KEY", "VALUE")
METADATA_COLUMNS = ("KEY", "VERSION", "LAST_MODIFIED_USER", "LAST_MODIFIED_DATE")
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
SHELL_SPECIAL = ("\\", '"', "$", "`")


def service_name(name: Optional[str]) -> str:
    """Last ``/`` segment of a record name."""
    if not name:
        return ""
    return name.split("/")[-1]


def sanitize_key(name: str) -> str:
    """Turn a record name into an environment variable name."""
    return service_name(name).upper().replace("-", "_")


def shell_escape(value: str) -> str:
    """Quote a value so a POSIX shell reads it back unchanged."""
    for ch in SHELL_SPECIAL:
        value = value.replace(ch, "\\" + ch)
    return f'"{value}"'


def format_timestamp(value: Union[datetime, float, int, None], record: str) -> str:
    """Floor a timestamp to whole seconds and format it in UTC. Naive datetimes are taken as UTC."""
    if value is None:
        raise MissingFieldError(record, "last modified date")
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        seconds = value.timestamp()
    else:
        seconds = float(value)
    return datetime.fromtimestamp(math.floor(seconds), tz=timezone.utc).strftime(DATE_FORMAT)


def _require_value(record: Union[Parameter, SecretValue], label: str) -> str:
    if record.value is None:
        raise MissingFieldError(f"{label} {record.name}", "value")
    return record.value


def _parameter_row(record: Parameter) -> List[str]:
    return [service_name(record.name), _require_value(record, "parameter")]


def _secret_value_row(record: SecretValue) -> List[str]:
    return [service_name(record.name), _require_value(record, "secret")]


def _parameter_metadata_row(record: ParameterMetadata) -> List[str]:
    user = service_name(record.last_modified_user)
    version = record.version or 0
    date = format_timestamp(record.last_modified_date, f"parameter {record.name}")
    return [service_name(record.name), str(version), user, date]


def _secret_entry_row(record: SecretEntry) -> List[str]:
    user = "lambda" if record.rotation_enabled else "no rotation policy"
    date = format_timestamp(record.last_changed_date, f"secret {record.name}")
    return [service_name(record.name), "0", user, date]


ROWS = {
    RecordKind.PARAMETER: _parameter_row,
    RecordKind.SECRET_VALUE: _secret_value_row,
    RecordKind.PARAMETER_METADATA: _parameter_metadata_row,
    RecordKind.SECRET_ENTRY: _secret_entry_row,
}

RECORD_TYPES = {
    RecordKind.PARAMETER: Parameter,
    RecordKind.SECRET_VALUE: SecretValue,
    RecordKind.PARAMETER_METADATA: ParameterMetadata,
    RecordKind.SECRET_ENTRY: SecretEntry,
}


def _check_kind(records: Sequence[Record], kind: RecordKind) -> None:
    expected = RECORD_TYPES[kind]
    for record in records:
        if not isinstance(record, expected):
            raise TypeError(f"Expected {expected.__name__} records, got {type(record).__name__}")


def get_table(records: Sequence[Record], kind: RecordKind, title: Optional[str] = None) -> Table:
    """
    Build a display table for records of one kind.

    Value kinds get KEY/VALUE columns, metadata kinds get
    KEY/VERSION/LAST_MODIFIED_USER/LAST_MODIFIED_DATE, even when
    ``records`` is empty.

    Raises:
        MissingFieldError: If a value or date needed for display is absent
    """
    _check_kind(records, kind)
    table = Table(title=title, box=box.SIMPLE_HEAD, show_edge=False)

    if kind.has_values:
        for column in VALUE_COLUMNS:
            table.add_column(column)
    else:
        table.add_column(METADATA_COLUMNS[0], justify="center")
        for column in METADATA_COLUMNS[1:]:
            table.add_column(column, justify="right")

    row = ROWS[kind]
    for record in records:
        table.add_row(*row(record))

    return table


def render_table(table: Table, width: int = 200) -> str:
    """Render a table to plain text."""
    buffer = io.StringIO()
    Console(file=buffer, width=width, color_system=None).print(table)
    return buffer.getvalue()


def export(records: Sequence[Record], kind: RecordKind, quote_secrets: bool = False) -> Optional[List[ExportPair]]:
    """
    Normalize records into environment variable pairs.

    Args:
        records: Records from a single fetch
        kind: Kind of every record in ``records``
        quote_secrets: Shell-escape and quote secret values (env files)

    Returns:
        None for metadata kinds, otherwise one pair per record in order
    """
    _check_kind(records, kind)
    if not kind.has_values:
        return None

    label = "parameter" if kind is RecordKind.PARAMETER else "secret"
    pairs = []
    for record in records:
        value = _require_value(record, label)
        if quote_secrets and kind is RecordKind.SECRET_VALUE:
            value = shell_escape(value)
        pairs.append(ExportPair(sanitize_key(record.name), value))
    return pairs


def postgres_env(raw: str) -> List[ExportPair]:
    """
    Map a Postgres connection secret to libpq environment variables.

    Raises:
        ShellConfigError: If the secret is not valid JSON of the expected shape
    """
    try:
        config = PostgresConfig.model_validate(json.loads(raw))
    except (json.JSONDecodeError, ValidationError, TypeError) as e:
        raise ShellConfigError(f"secret is not a Postgres connection config: {e}") from e

    return [
        ExportPair("PGHOST", config.host),
        ExportPair("PGPORT", str(config.port)),
        ExportPair("PGDATABASE", config.dbname),
        ExportPair("PGUSER", config.username),
        ExportPair("PGPASSWORD", config.password),
    ]
