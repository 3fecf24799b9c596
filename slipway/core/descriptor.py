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
# BUILD DESCRIPTOR
# -----------------------------------------------------------------------------
# Responsibility: Produce the Dockerfile that packages the publish output.
# The file is regenerated on every run and overwritten, never merged.
# -----------------------------------------------------------------------------

from pathlib import Path

from slipway.domain.errors import PipelineIOError

APP_DIR = "/app"
PUBLISH_DIR_NAME = "publish"
DEFAULT_INTERNAL_PORT = 8080

_TEMPLATE = """\
FROM {base_image} AS base
WORKDIR {app_dir}
EXPOSE {port}

FROM {base_image} AS final
WORKDIR {app_dir}
COPY {publish_dir}/ {app_dir}/
ENTRYPOINT ["dotnet", "{entry_point}"]
"""


def base_image_ref(repository: str, version_tag: str) -> str:
    """e.g. mcr.microsoft.com/dotnet/aspnet:8.0"""
    return f"{repository}:{version_tag}"


def render_descriptor(base_image: str, entry_point: str, port: int = DEFAULT_INTERNAL_PORT) -> str:
    """
    Render the two-stage Dockerfile.

    Stage one declares the runtime image and its listen port; stage two
    copies the publish output into /app and runs the entry assembly.
    Same inputs always give the same text.
    """
    return _TEMPLATE.format(
        base_image=base_image,
        app_dir=APP_DIR,
        port=int(port),
        publish_dir=PUBLISH_DIR_NAME,
        entry_point=entry_point,
    )


def write_descriptor(path: Path, content: str) -> Path:
    """
    Overwrite the descriptor file.

    Raises:
        PipelineIOError: If the file cannot be written.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        # Unix newlines regardless of host; the file is read inside Linux
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)
    except OSError as e:
        raise PipelineIOError(f"Cannot write descriptor {path}: {e}", path=str(path))
    return path
