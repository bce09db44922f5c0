"""
Destinations for exported pairs: stdout, env files and child processes.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

import click

from .errors import ExecError, OutputFileError
from .models import ExportPair

logger = logging.getLogger(__name__)

# Copied into the database shell's environment so an interactive client can run
SHELL_PASSTHROUGH = ("PATH", "HOME", "TERM")


def merge_pairs(*groups: Optional[Iterable[ExportPair]]) -> Dict[str, str]:
    """Merge pair groups into one environment; later groups win on key clashes."""
    env: Dict[str, str] = {}
    for group in groups:
        for key, value in group or []:
            env[key] = value
    return env


def write_stdout(pairs: Iterable[ExportPair]) -> None:
    for key, value in pairs:
        click.echo(f"{key}={value}")


def write_env_file(path: Path, pairs: Iterable[ExportPair]) -> None:
    """
    Write ``export KEY=VALUE`` lines to ``path``.

    Raises:
        OutputFileError: If the parent directory is missing or writing fails
    """
    path = Path(path)
    if not path.parent.exists():
        raise OutputFileError(f"{path.parent} does not exist")

    try:
        with open(path, "w") as f:
            for key, value in pairs:
                f.write(f"export {key}={value}\n")
    except OSError as e:
        raise OutputFileError(f"failed to write {path}: {e}") from e
    logger.info(f"Wrote env file {path}")


def run_command(command: Sequence[str], env: Dict[str, str]) -> None:
    """
    Run ``command`` with exactly ``env`` as its environment and wait for it.

    Raises:
        ExecError: If the command cannot start or exits non-zero
    """
    command = list(command)
    logger.debug(f"Running {command[0]} with {len(env)} environment variables")
    try:
        result = subprocess.run(command, env=dict(env), check=False)
    except OSError as e:
        raise ExecError(command, reason=f"failed to start: {e}") from e

    if result.returncode != 0:
        raise ExecError(command, returncode=result.returncode)


def exec_with_pairs(cmd: str, args: Sequence[str], *groups: Optional[Iterable[ExportPair]]) -> None:
    """Run ``cmd args...`` with only the merged pairs in its environment."""
    run_command([cmd, *args], merge_pairs(*groups))


def launch_db_shell(client: str, pairs: List[ExportPair]) -> None:
    """Start an interactive database client configured through ``pairs``."""
    env = {name: os.environ[name] for name in SHELL_PASSTHROUGH if name in os.environ}
    env.update(merge_pairs(pairs))
    run_command([client], env)
