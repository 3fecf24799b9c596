# =============================================================================
# SLIPWAY DOCKER CLI TESTS
# =============================================================================
# Tests for the docker CLI wrapper (runner is mocked).
# =============================================================================

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from slipway.domain.errors import ExternalToolError
from slipway.infra.docker_cli import DockerCli
from slipway.infra.runner import CommandResult


@pytest.fixture
def runner():
    """Runner that succeeds with empty output unless told otherwise."""
    mock = MagicMock()
    mock.run.return_value = CommandResult(args=[], returncode=0, stdout="")
    return mock


def _argv(runner):
    return runner.run.call_args[0][0]


class TestQueries:
    """Listing queries."""

    def test_list_running_names(self, runner):
        runner.run.return_value = CommandResult(args=[], returncode=0, stdout="svc1\nother\n\n")

        assert DockerCli(runner).list_running_names() == ["svc1", "other"]
        assert _argv(runner) == ["docker", "ps", "--format", "{{.Names}}"]

    def test_list_exited_is_every_non_running_container(self, runner):
        """Dead, removing and created containers hold the name too."""
        runner.run.side_effect = [
            CommandResult(args=[], returncode=0, stdout="web\nold-dead\nhalf-removed\nfresh\n"),
            CommandResult(args=[], returncode=0, stdout="web\n"),
        ]

        assert DockerCli(runner).list_exited_names() == ["old-dead", "half-removed", "fresh"]
        all_argv = runner.run.call_args_list[0][0][0]
        assert all_argv == ["docker", "ps", "-a", "--format", "{{.Names}}"]
        assert "--filter" not in all_argv

    def test_engine_version_uses_configured_binary(self, runner):
        runner.run.return_value = CommandResult(args=[], returncode=0, stdout="4.9.3\n")

        assert DockerCli(runner, docker_bin="podman").engine_version() == "4.9.3"
        assert _argv(runner) == ["podman", "info", "--format", "{{.ServerVersion}}"]

    def test_engine_unreachable_is_engine_error(self, runner):
        runner.run.return_value = CommandResult(args=[], returncode=1, stderr="Cannot connect to the Docker daemon")

        with pytest.raises(ExternalToolError) as exc_info:
            DockerCli(runner).engine_version()
        assert exc_info.value.operation == "engine"

    def test_list_image_ids(self, runner):
        runner.run.return_value = CommandResult(args=[], returncode=0, stdout="0123abcd\n")

        assert DockerCli(runner).list_image_ids("svc1:latest") == ["0123abcd"]
        assert _argv(runner) == ["docker", "images", "-q", "svc1:latest"]

    def test_query_failure_raises(self, runner):
        runner.run.return_value = CommandResult(args=[], returncode=1, stderr="daemon not running")

        with pytest.raises(ExternalToolError) as exc_info:
            DockerCli(runner).list_running_names()
        assert exc_info.value.operation == "list-running"
        assert "daemon not running" in exc_info.value.output

    def test_custom_binary(self, runner):
        DockerCli(runner, docker_bin="podman").list_running_names()
        assert _argv(runner)[0] == "podman"


class TestActions:
    """Mutating commands."""

    def test_stop(self, runner):
        DockerCli(runner).stop("svc1")
        assert _argv(runner) == ["docker", "stop", "svc1"]

    def test_remove_container(self, runner):
        DockerCli(runner).remove_container("svc1")
        assert _argv(runner) == ["docker", "rm", "svc1"]

    def test_remove_image(self, runner):
        DockerCli(runner).remove_image("svc1:latest")
        assert _argv(runner) == ["docker", "rmi", "svc1:latest"]

    def test_remove_image_forced(self, runner):
        DockerCli(runner).remove_image("svc1:latest", force=True)
        assert _argv(runner) == ["docker", "rmi", "-f", "svc1:latest"]

    def test_build_image(self, runner):
        DockerCli(runner).build_image(Path("/w/Dockerfile"), Path("/w"), "svc1:latest")
        assert _argv(runner) == ["docker", "build", "-f", str(Path("/w/Dockerfile")), "-t", "svc1:latest", str(Path("/w"))]

    def test_pull(self, runner):
        DockerCli(runner).pull("mcr.microsoft.com/dotnet/aspnet:8.0")
        assert _argv(runner) == ["docker", "pull", "mcr.microsoft.com/dotnet/aspnet:8.0"]

    def test_run_without_env(self, runner):
        runner.run.return_value = CommandResult(args=[], returncode=0, stdout="deadbeef\n")

        container_id = DockerCli(runner).run("svc1", "svc1:latest", 5000, 8080)

        assert container_id == "deadbeef"
        assert _argv(runner) == ["docker", "run", "-d", "--name", "svc1", "-p", "5000:8080", "svc1:latest"]

    def test_run_with_env(self, runner):
        DockerCli(runner).run("svc1", "svc1:latest", 5000, 8080, {"Logging__Console__FormatterName": "simple"})
        argv = _argv(runner)
        assert argv[-3:] == ["-e", "Logging__Console__FormatterName=simple", "svc1:latest"]

    @pytest.mark.parametrize(
        "call,operation",
        [
            (lambda cli: cli.stop("x"), "stop"),
            (lambda cli: cli.remove_container("x"), "remove"),
            (lambda cli: cli.remove_image("x"), "remove-image"),
            (lambda cli: cli.build_image(Path("D"), Path("."), "x"), "build-image"),
            (lambda cli: cli.pull("x"), "pull"),
            (lambda cli: cli.run("x", "x:latest", 1, 2), "run"),
        ],
    )
    def test_nonzero_exit_names_operation(self, runner, call, operation):
        runner.run.return_value = CommandResult(args=[], returncode=125, stderr="boom")

        with pytest.raises(ExternalToolError) as exc_info:
            call(DockerCli(runner))
        assert exc_info.value.operation == operation
        assert exc_info.value.exit_code == 125
