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
# DOCKER PROVIDER
# -----------------------------------------------------------------------------
# Responsibility: Wake a sleeping Docker Desktop and wait until the engine
# answers through the SDK.
#
# Only used for the default docker engine on this machine. Behind a shim or
# with another engine CLI the SDK socket is not the one the CLI talks to.
# -----------------------------------------------------------------------------

import os
import platform
import subprocess
import time

import docker
from docker import DockerClient
from docker.errors import DockerException
from rich.console import Console

console = Console()

WAKE_TIMEOUT_SECONDS = 60
DOCKER_DESKTOP_WINDOWS = r"C:\Program Files\Docker\Docker\Docker Desktop.exe"


class DockerProviderError(Exception):
    """Raised when the Docker Engine cannot be reached."""

    pass


class DockerProvider:
    """
    Docker SDK connection check with optional auto-wake.

    Used when the CLI engine check fails and auto-wake is enabled.
    """

    def __init__(self, auto_wake: bool = False) -> None:
        self._client: DockerClient | None = None
        self._auto_wake = auto_wake

    def _wake_docker(self) -> DockerClient | None:
        """
        Attempt to launch Docker Desktop and wait for it.

        Returns:
            DockerClient if wake succeeds, None otherwise.
        """
        system = platform.system()
        console.print("[yellow][DOCKER] Engine sleeping. Attempting auto-wake...[/yellow]")

        if system == "Darwin":
            subprocess.run(["open", "-a", "Docker"], check=False)
        elif system == "Windows":
            if not os.path.exists(DOCKER_DESKTOP_WINDOWS):
                console.print("[yellow][DOCKER] Docker Desktop not found in default location[/yellow]")
                return None
            subprocess.Popen([DOCKER_DESKTOP_WINDOWS])
        elif system == "Linux":
            # User-level systemctl avoids a sudo password prompt
            subprocess.run(["systemctl", "--user", "start", "docker"], check=False)

        with console.status(
            f"[yellow]Waiting for Docker Engine (up to {WAKE_TIMEOUT_SECONDS}s)...[/yellow]",
            spinner="clock",
        ):
            for _ in range(WAKE_TIMEOUT_SECONDS):
                try:
                    client = docker.from_env()
                    client.ping()
                    console.print("[green][DOCKER] Engine Online.[/green]")
                    return client
                except DockerException:
                    time.sleep(1)

        console.print("[red][DOCKER] Wake timeout - Docker did not respond[/red]")
        return None

    def connect(self) -> DockerClient:
        """
        Establish and verify a connection to the Docker daemon.

        Raises:
            DockerProviderError: If the engine is unreachable (after auto-wake, if enabled).
        """
        try:
            self._client = docker.from_env()
            self._client.ping()
            console.print("[green][DOCKER] Connected to Docker Engine[/green]")
            return self._client
        except DockerException as e:
            self._client = None
            if self._auto_wake:
                try:
                    self._client = self._wake_docker()
                except OSError as wake_error:
                    console.print(f"[red][DOCKER] Auto-wake failed: {wake_error}[/red]")

            if self._client is None:
                raise DockerProviderError(f"Docker Engine is not available: {e}")
            return self._client

    def is_connected(self) -> bool:
        """True if a connection was made and the engine still answers."""
        if self._client is None:
            return False
        try:
            self._client.ping()
            return True
        except DockerException:
            return False
