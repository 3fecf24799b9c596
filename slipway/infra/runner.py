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
# COMMAND RUNNER
# -----------------------------------------------------------------------------
# Responsibility: Execute external tools (dotnet, docker) via subprocess.
#
# Two strategies, chosen once at startup:
# - DirectRunner: run the command on this machine as-is
# - ShimRunner: run the command inside a compatibility shim (default: wsl),
#   translating Windows drive paths into the shim's mount paths
#
# Runners never judge exit codes; callers decide what non-zero means.
# -----------------------------------------------------------------------------

import re
import subprocess
from dataclasses import dataclass
from pathlib import PureWindowsPath
from typing import Sequence

from rich.console import Console

from slipway.domain.errors import ExternalToolError

console = Console()

DEFAULT_TIMEOUT_SECONDS = 600

# C:\Users\me or C:/Users/me
_DRIVE_PATH_RE = re.compile(r"^[A-Za-z]:[\\/]")


@dataclass
class CommandResult:
    """Outcome of one external command."""

    args: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Combined output, stderr first (that's where tools put the reason)."""
        return (self.stderr or "") + (self.stdout or "")


class CommandRunner:
    """
    Base runner: subprocess execution with timeout protection.

    Subclasses only decide how the argv is built.
    """

    def __init__(self, timeout: int = DEFAULT_TIMEOUT_SECONDS) -> None:
        self._timeout = timeout

    def build_command(self, args: Sequence[str]) -> list[str]:
        return [str(a) for a in args]

    def run(self, args: Sequence[str], operation: str, cwd: str | None = None) -> CommandResult:
        """
        Run a command and capture its output.

        Args:
            args: Command parts (e.g., ["docker", "ps"])
            operation: Operation name reported on failure
            cwd: Working directory

        Returns:
            CommandResult, whatever the exit code.

        Raises:
            ExternalToolError: If the command cannot be started or times out.
        """
        cmd = self.build_command(args)
        console.print(f"[dim]$ {' '.join(cmd)}[/dim]")

        try:
            completed = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired:
            raise ExternalToolError(
                f"{operation} timed out ({self._timeout}s limit)", operation=operation
            )
        except OSError as e:
            raise ExternalToolError(f"{operation} could not start {cmd[0]}: {e}", operation=operation)

        return CommandResult(
            args=cmd,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )


class DirectRunner(CommandRunner):
    """Runs commands on the host."""

    pass


def to_shim_path(value: str) -> str:
    """
    Translate a Windows drive path into its WSL mount path.

    C:\\src\\App -> /mnt/c/src/App. Anything else is returned unchanged.
    """
    if not _DRIVE_PATH_RE.match(value):
        return value
    win = PureWindowsPath(value)
    drive = win.drive.rstrip(":").lower()
    rest = "/".join(win.parts[1:])
    return f"/mnt/{drive}/{rest}" if rest else f"/mnt/{drive}"


class ShimRunner(CommandRunner):
    """
    Runs every command through a shim prefix (e.g. ["wsl"]).

    Used when the container engine only lives inside the shim environment.
    """

    def __init__(self, prefix: Sequence[str], timeout: int = DEFAULT_TIMEOUT_SECONDS) -> None:
        super().__init__(timeout=timeout)
        if not prefix:
            raise ValueError("Shim prefix must not be empty")
        self._prefix = list(prefix)

    @property
    def prefix(self) -> list[str]:
        return list(self._prefix)

    def build_command(self, args: Sequence[str]) -> list[str]:
        return self._prefix + [to_shim_path(str(a)) for a in args]


def make_runner(use_shim: bool, shim_prefix: Sequence[str], timeout: int) -> CommandRunner:
    """Pick the runner strategy for container engine calls."""
    if use_shim:
        console.print(f"[cyan][RUNNER] Routing engine calls through: {' '.join(shim_prefix)}[/cyan]")
        return ShimRunner(shim_prefix, timeout=timeout)
    return DirectRunner(timeout=timeout)
