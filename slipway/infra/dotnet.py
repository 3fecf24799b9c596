# Copyright 2026 Pramod Kumar Voola
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

# -----------------------------------------------------------------------------
# DOTNET TOOLCHAIN
# -----------------------------------------------------------------------------
# Responsibility: restore, build and publish the project with the dotnet CLI.
# All builds use the Release configuration and write into the work directory,
# never into the project's own bin/ or obj/ folders.
# -----------------------------------------------------------------------------

from pathlib import Path

from rich.console import Console

from slipway.domain.errors import ExternalToolError
from slipway.infra.runner import CommandResult, CommandRunner, DirectRunner

console = Console()

CONFIGURATION = "Release"


class DotnetToolchain:
    """Thin wrapper over `dotnet restore|build|publish`."""

    def __init__(self, runner: CommandRunner | None = None, dotnet_bin: str = "dotnet") -> None:
        self._runner = runner or DirectRunner()
        self._bin = dotnet_bin

    def _invoke(self, operation: str, args: list[str]) -> CommandResult:
        result = self._runner.run([self._bin, *args], operation=operation)
        if not result.ok:
            console.print(f"[red][DOTNET] {operation} failed (exit {result.returncode})[/red]")
            raise ExternalToolError(
                f"dotnet {operation} failed with exit code {result.returncode}",
                operation=operation,
                exit_code=result.returncode,
                output=result.output[-2000:],
            )
        return result

    def restore(self, project_file: Path) -> None:
        console.print(f"[cyan][DOTNET] Restoring {project_file.name}...[/cyan]")
        self._invoke("restore", ["restore", str(project_file)])

    def build(self, project_file: Path, output_dir: Path, framework_moniker: str | None = None) -> None:
        """Compile into output_dir. Restore already ran, so skip it here."""
        console.print(f"[cyan][DOTNET] Building {project_file.name} -> {output_dir}[/cyan]")
        args = ["build", str(project_file), "-c", CONFIGURATION, "-o", str(output_dir), "--no-restore"]
        if framework_moniker:
            args += ["-f", framework_moniker]
        self._invoke("build", args)

    def publish(self, project_file: Path, output_dir: Path, framework_moniker: str | None = None) -> None:
        console.print(f"[cyan][DOTNET] Publishing {project_file.name} -> {output_dir}[/cyan]")
        args = ["publish", str(project_file), "-c", CONFIGURATION, "-o", str(output_dir)]
        if framework_moniker:
            args += ["-f", framework_moniker]
        self._invoke("publish", args)
