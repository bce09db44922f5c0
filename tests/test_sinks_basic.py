"""
Basic tests for output sinks.
"""

import pytest
from unittest.mock import Mock, patch

from cloudwrap.errors import ExecError, OutputFileError
from cloudwrap.models import ExportPair
from cloudwrap.sinks import exec_with_pairs, launch_db_shell, merge_pairs, run_command, write_env_file


class TestMergePairs:
    def test_later_groups_win(self):
        env = merge_pairs([ExportPair("A", "1"), ExportPair("B", "2")], [ExportPair("B", "3")])

        assert env == {"A": "1", "B": "3"}

    def test_none_groups_are_skipped(self):
        assert merge_pairs(None, None) == {}


class TestEnvFile:
    """Test env file writing."""

    def test_writes_export_lines(self, tmp_path):
        path = tmp_path / "service.env"

        write_env_file(path, [ExportPair("DB_HOST", "10.0.0.1"), ExportPair("TOKEN", '"abc"')])

        assert path.read_text() == 'export DB_HOST=10.0.0.1\nexport TOKEN="abc"\n'

    def test_missing_parent_directory(self, tmp_path):
        path = tmp_path / "missing" / "service.env"

        with pytest.raises(OutputFileError, match="does not exist"):
            write_env_file(path, [ExportPair("A", "1")])
        assert not path.parent.exists()

    def test_unwritable_target(self, tmp_path):
        with pytest.raises(OutputFileError, match="failed to write"):
            write_env_file(tmp_path, [ExportPair("A", "1")])


class TestRunCommand:
    """Test child process spawning."""

    @patch("cloudwrap.sinks.subprocess.run")
    def test_passes_exact_environment(self, mock_run):
        mock_run.return_value = Mock(returncode=0)

        exec_with_pairs("env", ["-0"], [ExportPair("A", "1")], [ExportPair("B", "2")])

        mock_run.assert_called_once_with(["env", "-0"], env={"A": "1", "B": "2"}, check=False)

    @patch("cloudwrap.sinks.subprocess.run")
    def test_empty_environment_not_ambient(self, mock_run, monkeypatch):
        """With nothing resolved the child gets an empty environment."""
        monkeypatch.setenv("AMBIENT_SECRET", "leak")
        mock_run.return_value = Mock(returncode=0)

        exec_with_pairs("env", [], [], None)

        assert mock_run.call_args.kwargs["env"] == {}

    @patch("cloudwrap.sinks.subprocess.run")
    def test_nonzero_exit_raises(self, mock_run):
        mock_run.return_value = Mock(returncode=3)

        with pytest.raises(ExecError) as exc_info:
            run_command(["false"], {})

        assert exc_info.value.returncode == 3

    @patch("cloudwrap.sinks.subprocess.run")
    def test_start_failure_raises(self, mock_run):
        mock_run.side_effect = FileNotFoundError("no such file")

        with pytest.raises(ExecError, match="failed to start"):
            run_command(["nope"], {})


class TestDbShell:
    """Test database shell launch."""

    @patch("cloudwrap.sinks.subprocess.run")
    def test_pg_variables_and_passthrough(self, mock_run, monkeypatch):
        monkeypatch.setenv("PATH", "/usr/bin")
        monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "leak")
        mock_run.return_value = Mock(returncode=0)

        launch_db_shell("psql", [ExportPair("PGHOST", "h"), ExportPair("PGPORT", "5432")])

        args, kwargs = mock_run.call_args
        assert args[0] == ["psql"]
        assert kwargs["env"]["PGHOST"] == "h"
        assert kwargs["env"]["PGPORT"] == "5432"
        assert kwargs["env"]["PATH"] == "/usr/bin"
        assert "AWS_SECRET_ACCESS_KEY" not in kwargs["env"]

    @patch("cloudwrap.sinks.subprocess.run")
    def test_shell_failure_is_exec_error(self, mock_run):
        mock_run.return_value = Mock(returncode=2)

        with pytest.raises(ExecError):
            launch_db_shell("psql", [ExportPair("PGHOST", "h")])
