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
# DOMAIN MODELS - LAUNCH ORDERS
# -----------------------------------------------------------------------------
# These models describe one pipeline run: the options the operator passed,
# the directories the run works in, and the states of the named container
# and image it replaces.
#
# Invalid options are rejected here, before dotnet or docker is ever invoked.
# -----------------------------------------------------------------------------

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

# Image tag used for every locally built image
IMAGE_TAG = "latest"


class ContainerState(str, Enum):
    """Observed state of the named container."""

    ABSENT = "absent"
    RUNNING = "running"
    STOPPED = "stopped"


class ImageState(str, Enum):
    """Observed state of the named image."""

    ABSENT = "absent"
    PRESENT = "present"


@dataclass(frozen=True)
class ContainerHandle:
    """A container looked up by its name."""

    name: str
    state: ContainerState = ContainerState.ABSENT


@dataclass(frozen=True)
class ImageHandle:
    """
    An image looked up by the same name as its container.

    The two handles share a lookup key but have independent lifecycles:
    removing the container never implies the image is gone.
    """

    name: str
    state: ImageState = ImageState.ABSENT

    @property
    def reference(self) -> str:
        return f"{self.name}:{IMAGE_TAG}"


class PipelineOptions(BaseModel):
    """
    The operator's orders for one run.

    Fields:
    - project_path: Absolute path of the project directory
    - name: Container name, doubles as the image name
    - port: Host port mapped to the container's listen port
    - project_extension: Project file extension (".csproj", ".fsproj")
    - framework: Runtime version tag ("8.0"), also selects "net8.0" for builds
    - plain_console_log: Switch the app's console logger to plain text
    - use_shim: Route docker calls through the shim (e.g. WSL)
    """

    project_path: str = Field(..., min_length=1, description="Absolute project directory")
    name: str = Field(
        ...,
        min_length=1,
        max_length=128,
        pattern=r"^[a-z0-9][a-z0-9_.-]*$",
        description="Container and image name (lowercase, docker-safe)",
    )
    port: int = Field(..., ge=1, le=65535, description="External host port")
    project_extension: str = Field(".csproj", description="Project file extension")
    framework: str = Field(
        "8.0", pattern=r"^\d+\.\d+$", description="Runtime version tag, e.g. 8.0"
    )
    plain_console_log: bool = False
    use_shim: bool = False

    model_config = {"str_strip_whitespace": True}

    @field_validator("project_extension")
    @classmethod
    def _dotted_extension(cls, value: str) -> str:
        if not value.startswith("."):
            value = f".{value}"
        if len(value) < 2:
            raise ValueError("project_extension must not be empty")
        return value

    @property
    def framework_moniker(self) -> str:
        """Target framework moniker passed to dotnet, e.g. net8.0."""
        return f"net{self.framework}"


@dataclass(frozen=True)
class WorkspaceLayout:
    """
    Where a run reads and writes.

    The work directory sits next to the project directory, so build and
    publish output never lands in the project's own bin/ or obj/.
    """

    project_dir: Path
    project_name: str
    project_file: Path
    work_dir: Path

    @property
    def build_dir(self) -> Path:
        return self.work_dir / "build"

    @property
    def publish_dir(self) -> Path:
        return self.work_dir / "publish"

    @property
    def descriptor_path(self) -> Path:
        return self.work_dir / "Dockerfile"

    @property
    def entry_point(self) -> str:
        return f"{self.project_name}.dll"

    @classmethod
    def for_project(cls, project_dir: Path, extension: str, work_dir_prefix: str) -> "WorkspaceLayout":
        """Compute every path of a run from the project directory."""
        project_name = project_dir.name
        return cls(
            project_dir=project_dir,
            project_name=project_name,
            project_file=project_dir / f"{project_name}{extension}",
            work_dir=project_dir.parent / f"{work_dir_prefix}{project_name}",
        )
