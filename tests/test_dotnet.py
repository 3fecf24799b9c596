# =============================================================================
# SLIPWAY DOTNET TOOLCHAIN TESTS
# =============================================================================
# Tests for restore/build/publish command construction.
# =============================================================================

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from slipway.domain.errors import ExternalToolError
from slipway.infra.dotnet import DotnetToolchain
from slipway.infra.runner import CommandResult

PROJECT = Path("/src/MyApi/MyApi.csproj")


@pytest.fixture
def runner():
    mock = MagicMock()
    mock.run.return_value = CommandResult(args=[], returncode=0)
    return mock


class TestDotnetToolchain:
    """Test DotnetToolchain commands."""

    def test_restore(self, runner):
        DotnetToolchain(runner).restore(PROJECT)
        assert runner.run.call_args[0][0] == ["dotnet", "restore", str(PROJECT)]
        assert runner.run.call_args.kwargs["operation"] == "restore"

    def test_build_release_into_output(self, runner):
        DotnetToolchain(runner).build(PROJECT, Path("/w/build"), "net8.0")
        argv = runner.run.call_args[0][0]
        assert argv[:3] == ["dotnet", "build", str(PROJECT)]
        assert argv[argv.index("-c") + 1] == "Release"
        assert argv[argv.index("-o") + 1] == str(Path("/w/build"))
        assert argv[argv.index("-f") + 1] == "net8.0"

    def test_publish_without_framework(self, runner):
        DotnetToolchain(runner).publish(PROJECT, Path("/w/publish"))
        argv = runner.run.call_args[0][0]
        assert argv[:2] == ["dotnet", "publish"]
        assert "-f" not in argv

    def test_custom_binary(self, runner):
        DotnetToolchain(runner, dotnet_bin="/opt/dotnet/dotnet").restore(PROJECT)
        assert runner.run.call_args[0][0][0] == "/opt/dotnet/dotnet"

    @pytest.mark.parametrize("operation", ["restore", "build", "publish"])
    def test_failure_names_operation(self, runner, operation):
        runner.run.return_value = CommandResult(args=[], returncode=1, stdout="error CS1002: ; expected")
        toolchain = DotnetToolchain(runner)

        with pytest.raises(ExternalToolError) as exc_info:
            if operation == "restore":
                toolchain.restore(PROJECT)
            else:
                getattr(toolchain, operation)(PROJECT, Path("/w/out"), "net8.0")

        assert exc_info.value.operation == operation
        assert "CS1002" in exc_info.value.output
