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
# THE PIPELINE - ORCHESTRATOR
# -----------------------------------------------------------------------------
# Responsibility: Run one build-and-launch from project directory to running
# container, in a fixed order:
#
#   restore -> build -> publish -> reconcile-artifacts -> generate-descriptor
#   -> reconcile-resources -> build-image -> pull-base-image -> run-container
#
# Fail fast: the first failing step stops the run. Nothing is retried and
# nothing completed is rolled back (a failed run-container leaves the new
# image in place).
# -----------------------------------------------------------------------------

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from rich.console import Console

from slipway.core.artifacts import reconcile_artifacts
from slipway.core.config import Settings
from slipway.core.descriptor import base_image_ref, render_descriptor, write_descriptor
from slipway.core.lifecycle import ContainerEngine, ResourceReconciler
from slipway.domain.errors import ExternalToolError, PipelineIOError, SlipwayError, ValidationError
from slipway.domain.models import ImageHandle, PipelineOptions, WorkspaceLayout
from slipway.infra.docker_cli import DockerCli
from slipway.infra.docker_client import DockerProvider, DockerProviderError
from slipway.infra.dotnet import DotnetToolchain
from slipway.infra.runner import DirectRunner, make_runner

console = Console()

STEPS = (
    "restore",
    "build",
    "publish",
    "reconcile-artifacts",
    "generate-descriptor",
    "reconcile-resources",
    "build-image",
    "pull-base-image",
    "run-container",
)

# Switches the ASP.NET console logger from JSON to plain text
PLAIN_LOG_ENV = {"Logging__Console__FormatterName": "simple"}


@dataclass
class StepRecord:
    """Outcome of one pipeline step."""

    step: str
    status: str
    duration_seconds: float
    details: str | None = None


@dataclass
class PipelineResult:
    """Result of a successful run."""

    layout: WorkspaceLayout
    image_ref: str
    container_id: str
    copied_artifacts: list[str] = field(default_factory=list)
    steps: list[StepRecord] = field(default_factory=list)
    duration_seconds: float = 0.0


def resolve_layout(options: PipelineOptions, settings: Settings) -> WorkspaceLayout:
    """
    Check the project path and compute the run's directories.

    Raises:
        ValidationError: If the path is relative, missing, or has no project file.
    """
    project_dir = Path(options.project_path)

    if not project_dir.is_absolute():
        raise ValidationError(f"Project path must be absolute: {options.project_path}")
    if not project_dir.is_dir():
        raise ValidationError(f"Project directory does not exist: {project_dir}")

    layout = WorkspaceLayout.for_project(project_dir, options.project_extension, settings.work_dir_prefix)

    if not layout.project_file.is_file():
        raise ValidationError(f"Project file not found: {layout.project_file}")

    return layout


class Pipeline:
    """
    Runs the steps against injected collaborators.

    Collaborators default to the real dotnet/docker wrappers; tests pass fakes.
    """

    def __init__(
        self,
        options: PipelineOptions,
        settings: Settings | None = None,
        toolchain: DotnetToolchain | None = None,
        engine: ContainerEngine | None = None,
        probe: DockerProvider | None = None,
    ) -> None:
        self.options = options
        self.settings = settings or Settings()

        self._toolchain = toolchain or DotnetToolchain(
            DirectRunner(timeout=self.settings.command_timeout), self.settings.dotnet_bin
        )
        self._engine = engine or DockerCli(
            make_runner(options.use_shim, self.settings.shim_prefix, self.settings.command_timeout),
            self.settings.docker_bin,
        )
        self._resources = ResourceReconciler(self._engine, self.settings.force_image_removal)

        # The SDK only wakes the default Docker engine, never a shimmed or alternate CLI
        wake_supported = not options.use_shim and self.settings.docker_bin == "docker"
        if probe is None and self.settings.auto_wake and wake_supported:
            probe = DockerProvider(auto_wake=True)
        self._probe = probe

        self._records: list[StepRecord] = []

    @property
    def base_image(self) -> str:
        return base_image_ref(self.settings.base_image_repo, self.options.framework)

    @property
    def steps(self) -> list[StepRecord]:
        """Steps of the latest run, including the one that failed."""
        return list(self._records)

    def container_env(self) -> dict[str, str]:
        return dict(PLAIN_LOG_ENV) if self.options.plain_console_log else {}

    def validate(self) -> WorkspaceLayout:
        return resolve_layout(self.options, self.settings)

    def _step(self, name: str, action: Callable[[], object]) -> object:
        """Run one step, record it, and let any failure propagate."""
        console.print(f"[bold cyan][PIPELINE] >> {name}[/bold cyan]")
        started = time.time()
        try:
            outcome = action()
        except SlipwayError as e:
            self._records.append(StepRecord(name, "FAILED", time.time() - started, str(e)))
            console.print(f"[red][PIPELINE] {name} failed: {e}[/red]")
            raise
        self._records.append(StepRecord(name, "OK", time.time() - started))
        console.print(f"[green][PIPELINE] {name} done[/green]")
        return outcome

    def _prepare_work_dir(self, layout: WorkspaceLayout) -> None:
        for directory in (layout.build_dir, layout.publish_dir):
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise PipelineIOError(f"Cannot create {directory}: {e}", path=str(directory))

    def _check_engine(self) -> None:
        """
        Ask the same CLI the resource steps use whether its engine answers.

        With auto-wake, an unreachable engine gets one wake attempt and a
        second check.
        """
        if not self.settings.probe_engine:
            return
        try:
            version = self._engine.engine_version()
        except ExternalToolError:
            if self._probe is None:
                raise
            try:
                self._probe.connect()
            except DockerProviderError as e:
                raise ExternalToolError(str(e), operation="engine")
            version = self._engine.engine_version()
        console.print(f"[green][PIPELINE] Engine online ({version or 'unknown version'})[/green]")

    def _reconcile_resources(self) -> None:
        self._check_engine()
        self._resources.teardown(self.options.name)

    def run(self, layout: WorkspaceLayout | None = None) -> PipelineResult:
        """
        Execute every step in order.

        Args:
            layout: Result of an earlier validate(); validated here when omitted.

        Returns:
            PipelineResult describing the launched container.

        Raises:
            ValidationError: Before any step runs.
            ExternalToolError: A tool returned non-zero.
            PipelineIOError: A filesystem operation failed.
        """
        layout = layout or self.validate()
        options = self.options
        moniker = options.framework_moniker
        started = time.time()
        self._records = []

        console.print(
            f"[cyan][PIPELINE] {layout.project_name} -> {options.name} (port {options.port})[/cyan]"
        )
        self._prepare_work_dir(layout)

        self._step("restore", lambda: self._toolchain.restore(layout.project_file))
        self._step("build", lambda: self._toolchain.build(layout.project_file, layout.build_dir, moniker))
        self._step(
            "publish", lambda: self._toolchain.publish(layout.project_file, layout.publish_dir, moniker)
        )
        copied = self._step(
            "reconcile-artifacts",
            lambda: reconcile_artifacts(
                layout.build_dir, layout.publish_dir, self.settings.artifact_extension
            ),
        )
        self._step(
            "generate-descriptor",
            lambda: write_descriptor(
                layout.descriptor_path,
                render_descriptor(self.base_image, layout.entry_point, self.settings.internal_port),
            ),
        )
        self._step("reconcile-resources", self._reconcile_resources)
        image: ImageHandle = self._step(
            "build-image",
            lambda: self._resources.build(layout.descriptor_path, layout.work_dir, options.name),
        )
        self._step("pull-base-image", lambda: self._engine.pull(self.base_image))
        container_id = self._step(
            "run-container",
            lambda: self._resources.start(
                image, options.port, self.settings.internal_port, self.container_env()
            ),
        )

        duration = time.time() - started
        console.print(f"[bold green][PIPELINE] {options.name} running on port {options.port}[/bold green]")

        return PipelineResult(
            layout=layout,
            image_ref=image.reference,
            container_id=container_id,
            copied_artifacts=list(copied),
            steps=list(self._records),
            duration_seconds=duration,
        )
