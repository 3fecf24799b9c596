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
# DOCKER CLI
# -----------------------------------------------------------------------------
# Responsibility: Query and act on containers/images through the docker CLI.
#
# The engine may only be reachable inside a shim (WSL), where the CLI works
# but no socket is exposed to this process.
# Every call goes through the injected CommandRunner.
# -----------------------------------------------------------------------------

from pathlib import Path

from rich.console import Console

from slipway.domain.errors import ExternalToolError
from slipway.infra.runner import CommandResult, CommandRunner

console = Console()


def _lines(text: str) -> list[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


class DockerCli:
    """
    Container engine operations.

    Queries return point-in-time listings; actions raise ExternalToolError
    on any non-zero exit.
    """

    def __init__(self, runner: CommandRunner, docker_bin: str = "docker") -> None:
        self._runner = runner
        self._bin = docker_bin

    def _invoke(self, operation: str, args: list[str]) -> CommandResult:
        result = self._runner.run([self._bin, *args], operation=operation)
        if not result.ok:
            detail = result.stderr.strip() or result.stdout.strip() or "no output"
            console.print(f"[red][DOCKER] {operation} failed: {detail[:200]}[/red]")
            raise ExternalToolError(
                f"docker {operation} failed with exit code {result.returncode}",
                operation=operation,
                exit_code=result.returncode,
                output=detail,
            )
        return result

    # --- queries ---------------------------------------------------------

    def list_running_names(self) -> list[str]:
        result = self._invoke("list-running", ["ps", "--format", "{{.Names}}"])
        return _lines(result.stdout)

    def list_exited_names(self) -> list[str]:
        """
        Containers that exist but are not running.

        Every non-running status counts (exited, created, dead, removing):
        any of them still holds the name.
        """
        everything = _lines(self._invoke("list-exited", ["ps", "-a", "--format", "{{.Names}}"]).stdout)
        running = set(self.list_running_names())
        return [name for name in everything if name not in running]

    def list_image_ids(self, name: str) -> list[str]:
        result = self._invoke("list-images", ["images", "-q", name])
        return _lines(result.stdout)

    def engine_version(self) -> str:
        """Server version reported by the engine this CLI talks to."""
        result = self._invoke("engine", ["info", "--format", "{{.ServerVersion}}"])
        return result.stdout.strip()

    # --- actions ---------------------------------------------------------

    def stop(self, name: str) -> None:
        console.print(f"[yellow][DOCKER] Stopping container {name}[/yellow]")
        self._invoke("stop", ["stop", name])

    def remove_container(self, name: str) -> None:
        console.print(f"[yellow][DOCKER] Removing container {name}[/yellow]")
        self._invoke("remove", ["rm", name])

    def remove_image(self, name: str, force: bool = False) -> None:
        console.print(f"[yellow][DOCKER] Removing image {name}[/yellow]")
        args = ["rmi", name]
        if force:
            args.insert(1, "-f")
        self._invoke("remove-image", args)

    def build_image(self, descriptor: Path, context: Path, tag: str) -> None:
        console.print(f"[cyan][DOCKER] Building image {tag}[/cyan]")
        self._invoke("build-image", ["build", "-f", str(descriptor), "-t", tag, str(context)])

    def pull(self, image_ref: str) -> None:
        console.print(f"[cyan][DOCKER] Pulling {image_ref}[/cyan]")
        self._invoke("pull", ["pull", image_ref])

    def run(
        self,
        name: str,
        image_ref: str,
        host_port: int,
        container_port: int,
        env: dict[str, str] | None = None,
    ) -> str:
        """
        Start a detached, named, port-mapped container.

        Returns:
            The new container ID as printed by docker.
        """
        console.print(f"[cyan][DOCKER] Starting {name} on port {host_port}[/cyan]")
        args = ["run", "-d", "--name", name, "-p", f"{host_port}:{container_port}"]
        for key, value in (env or {}).items():
            args += ["-e", f"{key}={value}"]
        args.append(image_ref)
        result = self._invoke("run", args)
        return result.stdout.strip()
