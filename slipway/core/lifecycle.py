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
# RESOURCE LIFECYCLE RECONCILER
# -----------------------------------------------------------------------------
# Responsibility: Replace the named container and image so that every run
# succeeds, first run or fiftieth.
#
# State machine (one name, two independent resources):
#   container RUNNING -> stop -> STOPPED -> remove -> ABSENT
#   container STOPPED ----------------------> remove -> ABSENT
#   image PRESENT ---------------------> remove-image -> ABSENT
#   (always) build image -> run container
#
# Every state is queried first and an action is only issued when the
# resource exists: docker reports "no such container" as a plain failure,
# indistinguishable from a real one.
# -----------------------------------------------------------------------------

from pathlib import Path
from typing import Protocol

from rich.console import Console

from slipway.domain.models import (
    ContainerHandle,
    ContainerState,
    ImageHandle,
    ImageState,
)

console = Console()


class ContainerEngine(Protocol):
    """Queries and actions the reconciler needs from a container engine."""

    def list_running_names(self) -> list[str]: ...

    def list_exited_names(self) -> list[str]: ...

    def list_image_ids(self, name: str) -> list[str]: ...

    def engine_version(self) -> str: ...

    def stop(self, name: str) -> None: ...

    def remove_container(self, name: str) -> None: ...

    def remove_image(self, name: str, force: bool = False) -> None: ...

    def build_image(self, descriptor: Path, context: Path, tag: str) -> None: ...

    def pull(self, image_ref: str) -> None: ...

    def run(
        self,
        name: str,
        image_ref: str,
        host_port: int,
        container_port: int,
        env: dict[str, str] | None = None,
    ) -> str: ...


class ResourceReconciler:
    """
    Tear down the previous container/image and bring up fresh ones.

    No retries and no cleanup on failure: the first engine error propagates.
    """

    def __init__(self, engine: ContainerEngine, force_image_removal: bool = False) -> None:
        self._engine = engine
        self._force_image_removal = force_image_removal

    def container_state(self, name: str) -> ContainerHandle:
        if name in self._engine.list_running_names():
            return ContainerHandle(name, ContainerState.RUNNING)
        if name in self._engine.list_exited_names():
            return ContainerHandle(name, ContainerState.STOPPED)
        return ContainerHandle(name, ContainerState.ABSENT)

    def image_state(self, name: str) -> ImageHandle:
        handle = ImageHandle(name)
        if self._engine.list_image_ids(handle.reference):
            return ImageHandle(name, ImageState.PRESENT)
        return handle

    def teardown_container(self, name: str) -> ContainerHandle:
        """Drive the container to ABSENT."""
        handle = self.container_state(name)

        if handle.state == ContainerState.ABSENT:
            console.print(f"[dim][LIFECYCLE] No container named {name}[/dim]")
            return handle

        if handle.state == ContainerState.RUNNING:
            self._engine.stop(name)

        self._engine.remove_container(name)
        return ContainerHandle(name, ContainerState.ABSENT)

    def teardown_image(self, name: str) -> ImageHandle:
        """
        Drive the image to ABSENT.

        Queried after the container is gone. If another container still uses
        the image, docker refuses the removal and the run stops there, unless
        forced removal is configured.
        """
        handle = self.image_state(name)

        if handle.state == ImageState.ABSENT:
            console.print(f"[dim][LIFECYCLE] No image named {name}[/dim]")
            return handle

        self._engine.remove_image(handle.reference, force=self._force_image_removal)
        return ImageHandle(name, ImageState.ABSENT)

    def teardown(self, name: str) -> tuple[ContainerHandle, ImageHandle]:
        """Remove the previous container, then the previous image."""
        console.print(f"[cyan][LIFECYCLE] Reconciling resources for {name}[/cyan]")
        container = self.teardown_container(name)
        image = self.teardown_image(name)
        console.print(f"[green][LIFECYCLE] {name} cleared[/green]")
        return container, image

    def build(self, descriptor: Path, context: Path, name: str) -> ImageHandle:
        """Build the image. Always runs; there is no 'already built' shortcut."""
        image = ImageHandle(name, ImageState.PRESENT)
        self._engine.build_image(descriptor, context, image.reference)
        return image

    def start(
        self,
        image: ImageHandle,
        host_port: int,
        container_port: int,
        env: dict[str, str] | None = None,
    ) -> str:
        """
        Start a fresh container from the image, named like the image.

        Returns:
            The container ID reported by the engine.
        """
        return self._engine.run(image.name, image.reference, host_port, container_port, env)
